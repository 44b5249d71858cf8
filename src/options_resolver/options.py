"""Option value slots and the lazy options store.

Each option of a store is held in a slot which is either a concrete value
or a lazy computation evaluated against the store itself. Slots are
immutable definitions; evaluation state (memoized values and the stack of
options being resolved) belongs to the store, so a clone of a store starts
from the same definitions with a fresh evaluation state.

Reading an option through the store's mapping interface resolves it on
first access and memoizes the result. Reading an option that is already
being resolved means the lazy defaults depend on each other, and raises an
`OptionDefinitionError` instead of recursing.
"""

from collections.abc import Iterator, Mapping
from typing import TYPE_CHECKING

from options_resolver.errors import NoSuchOptionError, OptionDefinitionError
from options_resolver.values import accepts_previous, is_lazy

if TYPE_CHECKING:
    from typing import Self

if TYPE_CHECKING:
    from options_resolver.values import Default, LazyCallable, OverloadCallable, RuntimeValue


class Slot:
    """Base class of option value definitions."""

    #: Whether evaluating the slot invokes a computation.
    lazy: bool = False

    def evaluate(self, options: 'Options') -> 'RuntimeValue':
        """Compute the value held by the slot.

        Args:
            options: Store the slot belongs to, used by lazy computations
                to read other options.

        Returns:
            The value of the slot.
        """
        raise NotImplementedError


class ConcreteSlot(Slot):
    """Slot holding a plain value."""

    def __init__(self, value: 'RuntimeValue') -> None:
        self.value = value

    def evaluate(self, options: 'Options') -> 'RuntimeValue':  # noqa: ARG002
        """Return the stored value."""
        return self.value

    def __repr__(self) -> str:
        return f'{type(self).__name__}({self.value!r})'


class LazySlot(Slot):
    """Slot holding a computation of the options resolved so far."""

    lazy = True

    def __init__(self, function: 'LazyCallable') -> None:
        self.function = function

    def evaluate(self, options: 'Options') -> 'RuntimeValue':
        """Invoke the computation with the store."""
        return self.function(options)

    def __repr__(self) -> str:
        return f'{type(self).__name__}({self.function!r})'


class OverloadSlot(Slot):
    """Slot holding a computation that receives the previous value.

    The previous slot is captured when the overload is installed. It is
    evaluated directly rather than read by name from the store, so an
    overload is the only way for an option to depend on its own earlier
    definition without forming a cycle.
    """

    lazy = True

    def __init__(self, function: 'OverloadCallable', previous: Slot | None = None) -> None:
        self.function = function
        self.previous = previous

    def evaluate(self, options: 'Options') -> 'RuntimeValue':
        """Evaluate the previous slot, then invoke the computation."""
        previous = None
        if self.previous is not None:
            previous = self.previous.evaluate(options)

        return self.function(options, previous)

    def __repr__(self) -> str:
        return f'{type(self).__name__}({self.function!r}, previous={self.previous!r})'


class Options(Mapping[str, 'RuntimeValue']):
    """Container of option slots with lazy, memoized resolution.

    The store is passed as the first argument to lazy computations, which
    read other options through the mapping interface:

        >>> options = Options()
        >>> options.set('width', 10)
        >>> options.set('area', lambda opts: opts['width'] ** 2)
        >>> options.all()
        {'width': 10, 'area': 100}

    Once any option has been read, the store can no longer be modified:
    lazy computations could otherwise change the definitions they are
    evaluated from.
    """

    def __init__(self, defaults: 'Mapping[str, Default] | None' = None) -> None:
        """Initialize a store.

        Args:
            defaults: Optional initial definitions, installed with
                `overload()` semantics.
        """
        self._slots: dict[str, Slot] = {}
        self._values: dict[str, RuntimeValue] = {}
        self._resolving: dict[str, None] = {}
        self._reading = False

        for name, value in (defaults or {}).items():
            self.overload(name, value)

    def set(self, name: str, value: 'Default') -> None:
        """Define an option, discarding its previous definition.

        Computations accepting a previous value receive `None`.

        Args:
            name: Option name.
            value: Concrete value or lazy computation.

        Raises:
            OptionDefinitionError: If options have already been read.
        """
        self._ensure_writable()
        self._slots.pop(name, None)
        self.overload(name, value)

    def overload(self, name: str, value: 'Default') -> None:
        """Define an option on top of its previous definition.

        A concrete value or a computation accepting only the options
        replaces the previous definition. A computation accepting two
        positional arguments receives the previous value of the option
        (`None` if there was none) as its second argument.

        Args:
            name: Option name.
            value: Concrete value or lazy computation.

        Raises:
            OptionDefinitionError: If options have already been read.
        """
        self._ensure_writable()

        slot: Slot
        if not is_lazy(value):
            slot = ConcreteSlot(value)
        elif accepts_previous(value):
            slot = OverloadSlot(value, self._slots.get(name))
        else:
            slot = LazySlot(value)

        self._slots[name] = slot

    def merge(self, name: str, value: 'RuntimeValue') -> None:
        """Define an option as a concrete value, whatever its type.

        Used for caller-supplied values, which are never lazy even if
        callable.

        Raises:
            OptionDefinitionError: If options have already been read.
        """
        self._ensure_writable()
        self._slots[name] = ConcreteSlot(value)

    def replace(self, options: 'Mapping[str, Default]') -> None:
        """Replace all definitions with the given ones."""
        self.clear()

        for name, value in options.items():
            self.set(name, value)

    def remove(self, name: str) -> None:
        """Remove the definition of an option, if any."""
        self._ensure_writable()
        self._slots.pop(name, None)

    def clear(self) -> None:
        """Remove all definitions."""
        self._ensure_writable()
        self._slots.clear()

    def has(self, name: str) -> bool:
        """Check whether an option is defined."""
        return name in self._slots

    def is_lazy(self, name: str) -> bool:
        """Check whether an option is defined by a lazy computation.

        Raises:
            NoSuchOptionError: If the option is not defined.
        """
        if name not in self._slots:
            raise NoSuchOptionError(name)

        return self._slots[name].lazy

    def get(self, name: str, default: 'RuntimeValue' = None) -> 'RuntimeValue':  # type: ignore[override]
        """Resolve an option, or return a default if it is not defined."""
        if name not in self._slots:
            return default

        return self.resolve(name)

    def resolve(self, name: str) -> 'RuntimeValue':
        """Resolve a single option.

        Resolved values are memoized, so each computation runs at most
        once per store.

        Args:
            name: Option name.

        Returns:
            The resolved value.

        Raises:
            NoSuchOptionError: If the option is not defined.
            OptionDefinitionError: If the option is already being resolved,
                that is, lazy defaults depend on each other cyclically.
        """
        if name in self._values:
            return self._values[name]

        if name not in self._slots:
            raise NoSuchOptionError(name)

        if name in self._resolving:
            raise OptionDefinitionError.from_cycle(self._resolving)

        self._reading = True
        self._resolving[name] = None

        value = self._slots[name].evaluate(self)

        del self._resolving[name]
        self._values[name] = value

        return value

    def all(self) -> dict[str, 'RuntimeValue']:
        """Resolve all options in definition order.

        Returns:
            A new dictionary of resolved values.

        Raises:
            OptionDefinitionError: If lazy defaults depend on each other
                cyclically.
        """
        return {
            name: self.resolve(name)
            for name in self._slots
        }

    def clone(self) -> 'Self':
        """Copy the definitions into a new store with fresh evaluation state."""
        options = type(self)()
        options._slots = dict(self._slots)

        return options

    __copy__ = clone

    def _ensure_writable(self) -> None:
        """Reject modification once options have been read."""
        if self._reading:
            raise OptionDefinitionError(
                'Options cannot be modified anymore once options have been read.',
            )

    def __getitem__(self, name: str) -> 'RuntimeValue':
        return self.resolve(name)

    def __contains__(self, name: object) -> bool:
        return name in self._slots

    def __iter__(self) -> Iterator[str]:
        return iter(self._slots)

    def __len__(self) -> int:
        return len(self._slots)

    def __eq__(self, other: object) -> bool:
        """Compare by identity.

        Mapping equality would resolve every option and lock the store.
        Compare `all()` results to compare resolved values.
        """
        return self is other

    __hash__ = object.__hash__

    def __repr__(self) -> str:
        return f'{type(self).__name__}({list(self._slots)!r})'
