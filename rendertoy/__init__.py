"""Building blocks for a physically based path tracer: vector math, logging,
sampling, phase functions, media, microfacets, textures and geometry."""

__version__ = "0.1.0"

__all__ = [
    "geometry",
    "logger",
    "medium",
    "microfacet",
    "phase",
    "sampler",
    "texture",
    "vecmath",
]