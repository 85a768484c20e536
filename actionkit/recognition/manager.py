"""Action manager: builds action instances and decorates them per call site."""

from typing import Any, Iterable, List, Optional, Type

from ..actions.base import Action
from ..actions.capabilities import Surface
from ..config import get_settings
from ..exceptions import ConfigurationDefect
from ..logging import get_logger
from .frames import Backtrace
from .recognizers import Recognizer, ToolRecognizer, UIActionRecognizer

logger = get_logger(__name__)

ANCHOR = "identify_and_decorate"


class ActionManager:
    """Resolves action classes into instances, decorated for the caller's surface.

    Recognizers are consulted in registration order; the first one that
    classifies the backtrace wraps the instance. Without a match the plain
    instance is returned.
    """

    def __init__(
        self,
        recognizers: Optional[Iterable[Recognizer]] = None,
        backtrace_limit: Optional[int] = None,
    ):
        self._recognizers: List[Recognizer] = []
        self._frozen = False
        self.backtrace_limit = backtrace_limit or get_settings().backtrace_limit
        for recognizer in recognizers or ():
            self.register_recognizer(recognizer)

    @property
    def recognizers(self) -> List[Recognizer]:
        return list(self._recognizers)

    @property
    def frozen(self) -> bool:
        return self._frozen

    def register_recognizer(self, recognizer: Recognizer) -> None:
        """Append a recognizer.

        Raises:
            ConfigurationDefect: If the manager has been frozen
        """
        if self._frozen:
            raise ConfigurationDefect(
                f"Cannot register {recognizer!r}: recognizers are frozen after startup"
            )
        self._recognizers.append(recognizer)
        logger.debug(f"Registered recognizer: {recognizer!r}")

    def freeze(self) -> None:
        self._frozen = True

    def classify(self, backtrace: Backtrace, instance: Any = None) -> Optional[Surface]:
        """Surface of the first recognizer matching ``backtrace``."""
        recognizer = self._match(backtrace, instance)
        return recognizer.surface if recognizer else None

    def _match(self, backtrace: Backtrace, instance: Any) -> Optional[Recognizer]:
        for recognizer in self._recognizers:
            if isinstance(instance, Action) and not instance.supports(recognizer.surface):
                continue
            if recognizer.classify(backtrace) is not None:
                return recognizer
        return None

    def make(self, action_class: Type[Action], *args, **kwargs) -> Any:
        """Instantiate ``action_class`` and decorate it for the calling surface."""
        return self.identify_and_decorate(action_class(*args, **kwargs))

    def identify_and_decorate(self, instance: Any) -> Any:
        """Decorate ``instance`` for the surface found in the current stack."""
        backtrace = Backtrace.capture(
            self.backtrace_limit,
            anchor=ANCHOR,
            internal_modules=(__name__,),
        )
        recognizer = self._match(backtrace, instance)
        if recognizer is None:
            return instance

        logger.debug(f"Decorating {type(instance).__name__} for {recognizer.surface.value}")
        return recognizer.decorate(instance)


# Global manager instance
_manager: Optional[ActionManager] = None


def default_recognizers() -> List[Recognizer]:
    return [UIActionRecognizer(), ToolRecognizer()]


def get_action_manager() -> ActionManager:
    """Get the global action manager, built with the core recognizers."""
    global _manager
    if _manager is None:
        _manager = ActionManager(default_recognizers())
        _manager.freeze()
    return _manager


def configure_action_manager(recognizers: Iterable[Recognizer]) -> ActionManager:
    """Replace the global manager with one using ``recognizers``, frozen."""
    global _manager
    _manager = ActionManager(recognizers)
    _manager.freeze()
    return _manager


def make(action_class: Type[Action], *args, **kwargs) -> Any:
    """Resolve an action through the global manager."""
    return get_action_manager().make(action_class, *args, **kwargs)
