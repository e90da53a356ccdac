import dataclasses
import logging
from collections.abc import Callable

from calculator.config import class_mask_for
from client import TalentApiSession
from talents.converters.talent_api import NormalizerPolicy, convert
from talents.fallback import load_fallback
from talents.models import TalentData
from talents.parsers.talent_api.models import TalentApiPayload

logger = logging.getLogger(__name__)


@dataclasses.dataclass(frozen=True)
class RuntimeResult:
    data: TalentData
    is_loading: bool
    error: str | None
    is_fallback: bool


def build_talent_data(
    payload: TalentApiPayload,
    klass: str | None,
    static_data: TalentData | None = None,
    policy: NormalizerPolicy = NormalizerPolicy.LIVE,
) -> TalentData:
    return convert(
        payload,
        static_data=static_data,
        policy=policy,
        class_mask=class_mask_for(klass),
    )


class RuntimeTalentData:
    """Talent trees to display for the session's current class."""

    def __init__(
        self,
        session: TalentApiSession,
        policy: NormalizerPolicy = NormalizerPolicy.LIVE,
        fallback_loader: Callable[[str], TalentData] = load_fallback,
    ):
        self._session = session
        self._policy = policy
        self._fallback_loader = fallback_loader
        self._fallbacks: dict[str, TalentData] = {}
        self._last_good: dict[str, TalentData] = {}
        self._built: tuple[TalentApiPayload, TalentData] | None = None

    def _fallback(self, klass: str) -> TalentData:
        if klass not in self._fallbacks:
            self._fallbacks[klass] = self._fallback_loader(klass) if klass else {}
        return self._fallbacks[klass]

    def _substitute(self, klass: str) -> TalentData:
        return self._last_good.get(klass) or self._fallback(klass)

    def current(self) -> RuntimeResult:
        state = self._session.state
        klass = state.klass or ""
        if state.is_loading:
            # Nothing from the previous class may render while the new one loads
            return RuntimeResult(data={}, is_loading=True, error=None, is_fallback=True)
        if state.payload is None:
            return RuntimeResult(
                data=self._substitute(klass),
                is_loading=False,
                error=state.error,
                is_fallback=True,
            )

        if self._built is not None and self._built[0] is state.payload:
            return RuntimeResult(
                data=self._built[1], is_loading=False, error=None, is_fallback=False
            )
        try:
            data = build_talent_data(
                state.payload, klass, self._fallback(klass), self._policy
            )
        except Exception:
            logger.exception(
                "Building talent data for %r failed, using the last good dataset", klass
            )
            return RuntimeResult(
                data=self._substitute(klass),
                is_loading=False,
                error=None,
                is_fallback=True,
            )
        self._built = (state.payload, data)
        self._last_good[klass] = data
        return RuntimeResult(data=data, is_loading=False, error=None, is_fallback=False)
