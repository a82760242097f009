"""Ahead-of-time type introspection for the binding-construction layer.

Everything that looks at live signatures and annotations lives here. Modules
call it while building bindings; the injector and the bindings themselves
never do.
"""

from __future__ import annotations

import inspect
import types
from collections.abc import Callable
from dataclasses import dataclass, field
from inspect import Parameter
from typing import Annotated, Any, Union, get_args, get_origin, get_type_hints

from injectree.dependencies import NO_DEFAULT, Dependency
from injectree.exceptions import InjectreeConfigurationError
from injectree.key import Key
from injectree.markers import CONSTRUCTOR_ATTR, INJECT_ATTR, marker_of

_MISSING_ANNOTATION: Any = object()
_IMPLICIT_FIRST_PARAMETER_NAMES = {"self", "cls"}
_OPTIONAL_UNION_ARGS = 2


@dataclass(frozen=True, slots=True)
class SelectedConstructor:
    """The constructor picked for a class and its dependency descriptors."""

    implementation: type[Any]
    name: str
    function: Callable[..., Any]
    dependencies: list[Dependency] = field(default_factory=list)


@dataclass(frozen=True, slots=True)
class _Candidate:
    name: str
    signature_source: Callable[..., Any]
    function: Callable[..., Any]
    skip_first_parameter: bool
    marked: bool


def describe_callable(
    function: Callable[..., Any],
    *,
    skip_first_parameter: bool = False,
) -> list[Dependency]:
    """Return the dependency descriptors of ``function`` in parameter order.

    ``*args``/``**kwargs`` and unannotated parameters that have a default are
    skipped. Positional-only parameters are passed positionally, the rest by
    name.

    Raises:
        InjectreeConfigurationError: If a required parameter has no usable
            annotation.

    """
    provider_name = _provider_name(function)
    parameters = _parameters(function, skip_first_parameter=skip_first_parameter)
    hints, hints_error = _resolved_type_hints(function)
    dependencies: list[Dependency] = []

    for position, parameter in enumerate(parameters):
        if parameter.kind in (Parameter.VAR_POSITIONAL, Parameter.VAR_KEYWORD):
            continue

        annotation = _parameter_annotation(parameter, hints)
        has_default = parameter.default is not Parameter.empty
        if annotation is _MISSING_ANNOTATION:
            if has_default:
                continue
            msg = (
                f"Unable to infer dependency for required parameter '{parameter.name}' "
                f"in provider '{provider_name}'. Add a type annotation."
            )
            if hints_error is not None:
                msg = f"{msg} Original annotation error: {hints_error}"
            raise InjectreeConfigurationError(msg)

        key, admits_none = key_for_annotation(annotation)
        dependencies.append(
            Dependency(
                name=parameter.name,
                key=key,
                nullable=has_default or admits_none,
                positional=parameter.kind is Parameter.POSITIONAL_ONLY,
                position=position,
                default=parameter.default if has_default else NO_DEFAULT,
            ),
        )

    return dependencies


def key_for_annotation(annotation: Any) -> tuple[Key, bool]:
    """Return the key an annotation asks for and whether it admits ``None``."""
    if get_origin(annotation) is Annotated:
        inner, *_ = get_args(annotation)
        unwrapped, admits_none = _unwrap_optional(inner)
        qualified = Key.from_value(annotation)
        return Key(type=unwrapped, qualifier=qualified.qualifier), admits_none

    unwrapped, admits_none = _unwrap_optional(annotation)
    return Key.from_value(unwrapped), admits_none


def select_constructor(cls: type[Any]) -> SelectedConstructor:
    """Pick the constructor used to build ``cls`` and describe its dependencies.

    Candidates are ``__init__`` and the classmethods of ``cls`` marked with
    ``@inject`` or ``@constructor``. The single ``@inject`` candidate wins;
    otherwise a lone candidate; otherwise the only candidate whose parameters
    are all optional.

    Raises:
        InjectreeConfigurationError: If ``cls`` is not an instantiable class or
            the choice is ambiguous.

    """
    if not inspect.isclass(cls):
        msg = f"Constructor bindings need a class, got {cls!r}."
        raise InjectreeConfigurationError(msg)
    if inspect.isabstract(cls):
        msg = f"Constructor binding target '{cls.__qualname__}' cannot be an abstract class."
        raise InjectreeConfigurationError(msg)

    candidates = _constructor_candidates(cls)
    marked = [candidate for candidate in candidates if candidate.marked]
    if len(marked) > 1:
        names = ", ".join(candidate.name for candidate in marked)
        msg = f"Ambiguous constructor for '{cls.__qualname__}': several are marked @inject ({names})."
        raise InjectreeConfigurationError(msg)

    if marked:
        selected = marked[0]
    elif len(candidates) == 1:
        selected = candidates[0]
    else:
        no_args = [candidate for candidate in candidates if _all_parameters_optional(candidate)]
        if len(no_args) != 1:
            msg = (
                f"Ambiguous constructor for '{cls.__qualname__}': it must have a single "
                "constructor, one marked @inject, or exactly one whose parameters are all optional."
            )
            raise InjectreeConfigurationError(msg)
        selected = no_args[0]

    return SelectedConstructor(
        implementation=cls,
        name=selected.name,
        function=selected.function,
        dependencies=describe_callable(
            selected.signature_source,
            skip_first_parameter=selected.skip_first_parameter,
        ),
    )


def _constructor_candidates(cls: type[Any]) -> list[_Candidate]:
    init = cls.__init__
    candidates = [
        _Candidate(
            name="__init__",
            signature_source=init,
            function=cls,
            skip_first_parameter=True,
            marked=bool(marker_of(init, INJECT_ATTR, False)),  # noqa: FBT003
        ),
    ]
    for name, attribute in vars(cls).items():
        if not isinstance(attribute, classmethod):
            continue
        is_injection_point = bool(marker_of(attribute, INJECT_ATTR, False))  # noqa: FBT003
        if not is_injection_point and not marker_of(attribute, CONSTRUCTOR_ATTR, False):  # noqa: FBT003
            continue
        bound = getattr(cls, name)
        candidates.append(
            _Candidate(
                name=name,
                signature_source=bound,
                function=bound,
                skip_first_parameter=False,
                marked=is_injection_point,
            ),
        )
    return candidates


def _all_parameters_optional(candidate: _Candidate) -> bool:
    parameters = _parameters(
        candidate.signature_source,
        skip_first_parameter=candidate.skip_first_parameter,
    )
    return all(
        parameter.default is not Parameter.empty
        or parameter.kind in (Parameter.VAR_POSITIONAL, Parameter.VAR_KEYWORD)
        for parameter in parameters
    )


def _unwrap_optional(annotation: Any) -> tuple[Any, bool]:
    origin = get_origin(annotation)
    if origin is Union or origin is types.UnionType:
        args = get_args(annotation)
        non_none = [arg for arg in args if arg is not type(None)]
        if len(args) == _OPTIONAL_UNION_ARGS and len(non_none) == 1:
            return non_none[0], True
    return annotation, False


def _parameter_annotation(parameter: Parameter, hints: dict[str, Any]) -> Any:
    annotation = hints.get(parameter.name, _MISSING_ANNOTATION)
    if annotation is not _MISSING_ANNOTATION:
        return annotation

    raw_annotation = parameter.annotation
    if raw_annotation is not Parameter.empty and not isinstance(raw_annotation, str):
        return raw_annotation
    return _MISSING_ANNOTATION


def _parameters(
    function: Callable[..., Any],
    *,
    skip_first_parameter: bool,
) -> tuple[Parameter, ...]:
    parameters = tuple(inspect.signature(function).parameters.values())
    if skip_first_parameter and parameters and parameters[0].name in _IMPLICIT_FIRST_PARAMETER_NAMES:
        return parameters[1:]
    return parameters


def _resolved_type_hints(function: Callable[..., Any]) -> tuple[dict[str, Any], Exception | None]:
    try:
        return get_type_hints(function, include_extras=True), None
    except (AttributeError, NameError, TypeError) as error:
        return {}, error


def _provider_name(function: Callable[..., Any]) -> str:
    return getattr(function, "__qualname__", repr(function))
