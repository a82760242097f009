from __future__ import annotations

from collections.abc import Callable
from typing import TYPE_CHECKING, Any, TypeVar

from injectree.bindings import ProviderBinding
from injectree.dependencies import NO_VALUE
from injectree.introspection import describe_callable
from injectree.key import make_key

if TYPE_CHECKING:
    from injectree.injector import Injector

T = TypeVar("T")


def call_injected(injector: Injector, function: Callable[..., T]) -> T:
    """Call ``function`` with every parameter resolved from ``injector``.

    Optional parameters whose keys nobody binds keep their defaults.

    Examples:
        .. code-block:: python

            def main(app: Application, settings: Settings) -> int:
                return app.run(settings.port)

            exit_code = call_injected(injector, main)

    """
    binding = ProviderBinding(make_key(Callable), function, describe_callable(function))

    def provide(key: Any, optional: bool = False) -> Any:  # noqa: FBT001, FBT002
        if optional and not injector.contains_binding_for(key):
            return NO_VALUE
        return injector.get_instance_of_key(key)

    return binding.build_instance(provide)
