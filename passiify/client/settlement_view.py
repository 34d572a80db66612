"""
View model behind the admin settlements console.

Fetches the settlement snapshot once, then filters, sorts and paginates the
gym and event collections in memory, and issues mark-as-paid commands.
UI concerns are injected as callbacks (`confirm`, `prompt_note`, `alert`,
`navigate`); each may be a plain function or a coroutine function.
"""
import enum
import inspect
import logging
from dataclasses import dataclass
from typing import Any, Callable, Dict, List, Optional, Set, Union
import httpx
from pydantic import ValidationError
from passiify.core.config import settings
from passiify.client.api import ApiClient
from passiify.client.credentials import CredentialRole, handle_unauthorized
from passiify.client.exceptions import ApiError, PayoutValidationError, UnauthorizedError
from passiify.client import settlements as calc
from passiify.schemas.settlement import SettlementOverview, SettlementSummary

logger = logging.getLogger(__name__)

OVERVIEW_PATH = "/admin/settlements/overview"
MARK_PAID_PATH = "/admin/settlements/mark-paid/{kind}/{partner_id}"

LOAD_FAILED_MESSAGE = "Unable to load settlements. Please try again."
MARK_FAILED_MESSAGE = "Failed to mark payout as paid. Please try again."
NOTHING_TO_PAY_MESSAGE = "Net payable is 0, nothing to mark as paid."
NOTE_PROMPT = "Optional note (e.g. UPI ref no., date). You can also leave this blank:"


class Tab(str, enum.Enum):
    GYMS = "gyms"
    EVENTS = "events"


class PayoutKind(str, enum.Enum):
    GYM = "gym"
    EVENT = "event"


@dataclass(frozen=True)
class Idle:
    """Nothing fetched yet."""


@dataclass(frozen=True)
class Loading:
    """A fetch is outstanding; `previous` is the last good snapshot, if any."""
    previous: Optional[SettlementOverview] = None


@dataclass(frozen=True)
class Loaded:
    snapshot: SettlementOverview


@dataclass(frozen=True)
class Failed:
    """The last fetch failed; `previous` stays on screen next to the error."""
    message: str
    previous: Optional[SettlementOverview] = None


FetchState = Union[Idle, Loading, Loaded, Failed]


async def _call(callback: Callable, *args) -> Any:
    result = callback(*args)
    if inspect.isawaitable(result):
        result = await result
    return result


def _deny(message: str) -> bool:
    return False


def _no_note(message: str) -> str:
    return ""


def _log_alert(message: str) -> None:
    logger.warning(message)


def validate_payout(net_amount) -> float:
    """Net amount as a number; raises PayoutValidationError unless positive."""
    net = calc.parse_min_net(net_amount)
    if net <= 0:
        raise PayoutValidationError(NOTHING_TO_PAY_MESSAGE)
    return net


class SettlementsView:
    """Settlement console state: snapshot, filters, per-tab pages, in-flight payouts."""

    def __init__(
        self,
        client: ApiClient,
        confirm: Callable[[str], Any] = _deny,
        prompt_note: Callable[[str], Any] = _no_note,
        alert: Callable[[str], Any] = _log_alert,
        navigate: Optional[Callable[[str], Any]] = None,
        page_size: Optional[int] = None
    ):
        self.client = client
        self.confirm = confirm
        self.prompt_note = prompt_note
        self.alert = alert
        self.navigate = navigate if navigate is not None else client.navigate
        self.page_size = page_size or settings.SETTLEMENT_PAGE_SIZE

        self.state: FetchState = Idle()
        self.active_tab = Tab.GYMS
        self.search_term = ""
        self.min_net_filter: Union[str, float, None] = ""
        self.pages: Dict[Tab, int] = {Tab.GYMS: 1, Tab.EVENTS: 1}
        self.marking: Optional[str] = None
        self._in_flight: Set[str] = set()
        self._alive = True

    # ---- lifecycle -------------------------------------------------------

    @property
    def alive(self) -> bool:
        return self._alive

    def close(self) -> None:
        """Tear the view down; responses arriving later are discarded."""
        self._alive = False

    # ---- snapshot --------------------------------------------------------

    @property
    def snapshot(self) -> Optional[SettlementOverview]:
        """Last successfully loaded snapshot, kept through reloads and failures."""
        if isinstance(self.state, Loaded):
            return self.state.snapshot
        if isinstance(self.state, (Loading, Failed)):
            return self.state.previous
        return None

    @property
    def loading(self) -> bool:
        return isinstance(self.state, Loading)

    @property
    def error(self) -> Optional[str]:
        return self.state.message if isinstance(self.state, Failed) else None

    def _on_unauthorized(self) -> None:
        """Drop the rejected admin token; a closed view does not navigate."""
        navigate = self.navigate if self._alive else None
        handle_unauthorized(CredentialRole.ADMIN, self.client.store, navigate)

    def _has_admin_token(self) -> bool:
        """Without an admin token the console sends nothing and goes to admin login."""
        if self.client.store.get(CredentialRole.ADMIN):
            return True
        self._on_unauthorized()
        return False

    async def fetch_overview(self) -> FetchState:
        """
        Load the snapshot. Success replaces it wholesale; failure keeps the
        previous one and records a retryable error.
        """
        if not self._alive:
            return self.state
        if not self._has_admin_token():
            return self.state

        self.state = Loading(previous=self.snapshot)
        try:
            response = await self.client.get(OVERVIEW_PATH)
            overview = SettlementOverview.model_validate(response.json() or {})
        except UnauthorizedError as exc:
            self._on_unauthorized()
            message = exc.message or LOAD_FAILED_MESSAGE
        except ApiError as exc:
            message = exc.message or LOAD_FAILED_MESSAGE
        except (httpx.HTTPError, ValidationError, ValueError):
            logger.error("Error loading settlements overview", exc_info=True)
            message = LOAD_FAILED_MESSAGE
        else:
            message = None

        if not self._alive:
            logger.debug("Discarding settlements response for a closed view")
            return self.state
        # An overlapping fetch may have loaded newer rows since this one started.
        self.state = Loaded(overview) if message is None else Failed(message, self.snapshot)
        return self.state

    async def retry(self) -> FetchState:
        return await self.fetch_overview()

    # ---- filters and pagination -----------------------------------------

    def _reset_page(self) -> None:
        self.pages[self.active_tab] = 1

    def set_search_term(self, term: str) -> None:
        if term != self.search_term:
            self.search_term = term
            self._reset_page()

    def set_min_net_filter(self, value: Union[str, float, None]) -> None:
        if value != self.min_net_filter:
            self.min_net_filter = value
            self._reset_page()

    def set_active_tab(self, tab: Union[Tab, str]) -> None:
        tab = Tab(tab)
        if tab != self.active_tab:
            self.active_tab = tab
            self._reset_page()

    def clear_filters(self) -> None:
        self.set_search_term("")
        self.set_min_net_filter("")

    def rows(self, tab: Optional[Tab] = None) -> List[calc.SettlementRow]:
        snapshot = self.snapshot
        if snapshot is None:
            return []
        tab = Tab(tab or self.active_tab)
        return list(snapshot.gyms if tab == Tab.GYMS else snapshot.events)

    def filtered_rows(self, tab: Optional[Tab] = None) -> List[calc.SettlementRow]:
        return calc.compute_filtered_rows(self.rows(tab), self.search_term, self.min_net_filter)

    @property
    def current_page(self) -> int:
        return self.pages[self.active_tab]

    @property
    def total_pages(self) -> int:
        return calc.total_pages(len(self.filtered_rows()), self.page_size)

    def visible_rows(self) -> List[calc.SettlementRow]:
        return calc.paginate(self.filtered_rows(), self.current_page, self.page_size)

    def page_window(self):
        return calc.page_window(len(self.filtered_rows()), self.current_page, self.page_size)

    @property
    def can_go_prev(self) -> bool:
        return self.current_page > 1

    @property
    def can_go_next(self) -> bool:
        return self.current_page < self.total_pages

    def prev_page(self) -> None:
        if self.can_go_prev:
            self.pages[self.active_tab] -= 1

    def next_page(self) -> None:
        if self.can_go_next:
            self.pages[self.active_tab] += 1

    def is_empty_result(self) -> bool:
        """Loaded data, but nothing matches the current filters (not an error)."""
        return self.snapshot is not None and not self.filtered_rows()

    # ---- summary ---------------------------------------------------------

    @property
    def total_partners(self) -> int:
        snapshot = self.snapshot
        return calc.total_partners(snapshot) if snapshot is not None else 0

    @property
    def effective_take_rate(self) -> int:
        snapshot = self.snapshot
        return calc.effective_take_rate(snapshot.summary) if snapshot is not None else 0

    # ---- payouts ---------------------------------------------------------

    @staticmethod
    def marking_key(kind: Union[PayoutKind, str], partner_id) -> str:
        return f"{PayoutKind(kind).value}-{partner_id}"

    def is_marking(self, kind: Union[PayoutKind, str], partner_id) -> bool:
        """Whether the mark-as-paid control of this row should be disabled."""
        return self.marking_key(kind, partner_id) in self._in_flight

    async def _alert(self, message: str) -> None:
        if self._alive:
            await _call(self.alert, message)

    async def mark_as_paid(self, kind: Union[PayoutKind, str], partner_id, name: str, net_amount) -> bool:
        """
        Mark a partner's pending payouts as paid after confirmation, then
        reload the snapshot. Returns True when the backend accepted it.
        """
        try:
            kind = PayoutKind(kind)
        except ValueError:
            await self._alert(f"Unknown payout type: {kind}")
            return False
        try:
            net = validate_payout(net_amount)
        except PayoutValidationError as exc:
            await self._alert(str(exc))
            return False

        key = self.marking_key(kind, partner_id)
        if key in self._in_flight:
            return False

        # The row stays disabled from confirmation until the request settles.
        self._in_flight.add(key)
        try:
            accepted = await self._submit_payout(kind, partner_id, name, net, key)
        finally:
            self._in_flight.discard(key)
            if self.marking == key:
                self.marking = None

        if accepted and self._alive:
            await self.fetch_overview()
        return accepted

    async def _submit_payout(self, kind: PayoutKind, partner_id, name: str, net: float, key: str) -> bool:
        label = kind.value
        confirm_message = (
            f"Mark {calc.format_inr(net)} as PAID for {name or label}?\n\n"
            f"This will update all pending bookings for this {label} to payoutStatus = \"paid\"."
        )
        if not await _call(self.confirm, confirm_message):
            return False
        note = await _call(self.prompt_note, NOTE_PROMPT)
        if not self._has_admin_token():
            return False

        self.marking = key
        path = MARK_PAID_PATH.format(kind=kind.value, partner_id=partner_id)
        try:
            await self.client.post(path, json={"note": note or ""})
        except UnauthorizedError:
            self._on_unauthorized()
            return False
        except ApiError as exc:
            await self._alert(exc.message or MARK_FAILED_MESSAGE)
            return False
        except httpx.HTTPError:
            logger.error(f"Error marking {key} payout as paid", exc_info=True)
            await self._alert(MARK_FAILED_MESSAGE)
            return False

        logger.info(f"Marked {key} payout of {net:.2f} as paid")
        return True


async def fetch_partner_settlement(client: ApiClient) -> SettlementOverview:
    """
    Pending payouts of the signed-in partner's gyms and events, merged.

    A 401 clears the credential that was used and re-raises.
    """
    merged = SettlementOverview()
    for path in ("/gyms/me/settlement", "/events/host/settlement"):
        try:
            response = await client.get(path)
        except UnauthorizedError:
            client.handle_unauthorized(path)
            raise
        part = SettlementOverview.model_validate(response.json() or {})
        merged.gyms.extend(part.gyms)
        merged.events.extend(part.events)
    merged.summary = SettlementSummary.from_rows(merged.gyms, merged.events)
    return merged
