from __future__ import annotations

from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from collections.abc import Sequence

    from injectree.key import Key
    from injectree.scope import Scope


class InjectreeError(Exception):
    """Represent a base class for all injectree-specific failures.

    Catch this type when you want to handle any injectree error path without
    matching each concrete exception class individually.
    """


class InjectreeInvalidKeyError(InjectreeError, ValueError):
    """Signal an attempt to build a ``Key`` without a type.

    Raised by ``make_key`` and ``Key`` itself. It is also a ``ValueError`` so
    callers validating arguments generically keep working.
    """


class InjectreeConfigurationError(InjectreeError):
    """Signal invalid binding, scope or injector configuration.

    Raised while bindings are built or registered, never during resolution:
    by constructor selection when a class has no unambiguous injection point,
    by ``Injector.register_binding`` when a binding names a scope kind the
    injector does not know, by ``BindingBuilder.build`` for contradictory
    builder state, and by the ``Injector`` constructor for invalid scope
    sharing requests.

    Typical fixes include marking one constructor with ``@inject``,
    registering the scope in a module, or sharing only scopes the parent has.
    """


class InjectreeUnresolvedDependencyError(InjectreeError):
    """Signal that no injector in the parent chain has a binding for a key.

    Raised by ``Injector.get_instance_of`` for the requested key or for any
    required dependency discovered while building it.

    Typical fixes include binding the key in a module of the injector or of
    one of its ancestors, or marking the dependency optional.
    """

    def __init__(self, key: Key, injector_name: str | None = None) -> None:
        self.key = key
        self.injector_name = injector_name
        where = f"injector {injector_name!r}" if injector_name else "the injector"
        super().__init__(f"{key} has no binding in {where} or any of its ancestors.")


class InjectreeCircularDependencyError(InjectreeError):
    """Signal that a key recurs in its own resolution chain.

    ``chain`` holds the keys from the first occurrence of the repeated key to
    its repetition, in resolution order, so ``A -> B -> C -> A`` is reported
    as ``[A, B, C, A]``.

    Typical fixes include breaking the cycle with a provider that resolves one
    side lazily through the ``Injector``, or extracting the shared part into a
    third binding.
    """

    def __init__(self, chain: Sequence[Key]) -> None:
        self.chain = list(chain)
        self.key = self.chain[0]
        rendered = " -> ".join(str(key) for key in self.chain)
        super().__init__(f"Circular dependency detected on {self.key}: {rendered}")


class InjectreeScopeStateError(InjectreeError):
    """Signal use of a scope outside of its activity window.

    Raised by ``Scope.get``/``Scope.put`` and by scoped bindings when the
    scope reports it is not in progress, for example resolving a
    ``RequestScope`` binding before ``enter()`` or after ``exit()``.
    """

    def __init__(self, scope: Scope) -> None:
        self.scope = scope
        super().__init__(f"{type(scope).__name__} is not in progress.")
