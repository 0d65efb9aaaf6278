"""githashprop - commit hash and branch properties read straight from .git metadata."""

from githashprop.resolver import HashSource, ResolutionResult, ResolverConfig, resolve

__version__ = "0.1.0"

__all__ = ["HashSource", "ResolutionResult", "ResolverConfig", "__version__", "resolve"]
