from injectree.bindings import (
    Binding,
    BindingKind,
    ConstructorBinding,
    InstanceBinding,
    ProviderBinding,
    Rebinding,
    ScopedBinding,
)
from injectree.cycle_check_mode import CycleCheckMode
from injectree.declarative import DeclarativeModule
from injectree.dependencies import Dependency
from injectree.exceptions import (
    InjectreeCircularDependencyError,
    InjectreeConfigurationError,
    InjectreeError,
    InjectreeInvalidKeyError,
    InjectreeScopeStateError,
    InjectreeUnresolvedDependencyError,
)
from injectree.injection import call_injected
from injectree.injector import Injector
from injectree.key import Key, Named, Qualifier, make_key
from injectree.markers import InScope, Singleton, constructor, inject, injectable
from injectree.module import BasicModule, BindingBuilder, Module
from injectree.scanner import ScannerModule
from injectree.scope import RequestScope, Scope, SessionScope, SingletonScope, WindowScope

__all__ = [
    "BasicModule",
    "Binding",
    "BindingBuilder",
    "BindingKind",
    "ConstructorBinding",
    "CycleCheckMode",
    "DeclarativeModule",
    "Dependency",
    "InScope",
    "Injector",
    "InjectreeCircularDependencyError",
    "InjectreeConfigurationError",
    "InjectreeError",
    "InjectreeInvalidKeyError",
    "InjectreeScopeStateError",
    "InjectreeUnresolvedDependencyError",
    "InstanceBinding",
    "Key",
    "Module",
    "Named",
    "ProviderBinding",
    "Qualifier",
    "Rebinding",
    "RequestScope",
    "ScannerModule",
    "Scope",
    "ScopedBinding",
    "SessionScope",
    "Singleton",
    "SingletonScope",
    "WindowScope",
    "call_injected",
    "constructor",
    "inject",
    "injectable",
    "make_key",
]
