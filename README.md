# rendertoy

Building blocks for a physically based path tracer, written in Python on
top of numpy. Vectors are plain numpy arrays of length 3 (or 2 for texture
coordinates and 4 for colours); functions also accept any sequence of the
right length.

## Contents

- `rendertoy.vecmath`: shading-frame trigonometry (`cos_theta`,
  `sin_phi`, `tan2_theta`, …), `erf` / `erf_inv`, `reflect`, `refract`
  (returns `None` on total internal reflection), `faceforward`,
  `coordinate_system`, `spherical_direction`, `spherical_theta`,
  `spherical_phi` and `find_interval`.
- `rendertoy.logger`: a shared, thread-safe console logger. `get_logger()`
  returns it; `info`, `warn` and `crit` write lines of the form
  `<date time> <TAG> <message>` with a coloured tag per `LogLevel`.
  One-dimensional numpy arrays in a message are written with
  `format_vector`, as `(a,b,c)`.
- `rendertoy.sampler`: hemisphere, disk and sphere sampling,
  `power_heuristic`, `sample_exponential`, `sample_discrete`,
  `Distribution1D`, `Distribution2D` and the Walker `AliasTable`.
- `rendertoy.phase`: `IsotropicPhaseFunction` and
  `HenyeyGreensteinPhaseFunction`; `sample_p` returns `(wi, pdf)`.
- `rendertoy.medium`: `HomogeneousMedium` with transmittance (`tr`) and
  distance sampling (`sample`), which returns the throughput weight and a
  `VolumeInteraction`, or `None` when the ray is not scattered.
- `rendertoy.microfacet`: `BeckmannDistribution` (`d`, `lambda_`, `g1`,
  `g`, `sample_wh`, `pdf`), `roughness_to_alpha` and visible-normal
  sampling with `beckmann_sample`.
- `rendertoy.texture`: `ConstantNumerical`, `ColorTexture` and
  `ImageTexture` (an array of shape `(height, width, channels)`), sampled
  nearest-neighbour or bilinear according to `SampleMethod`.
- `rendertoy.geometry`: `Triangle` with ray intersection returning a
  `Hit` (or `None`), bounding box, area, surface sampling and solid-angle
  pdf; composable signed-distance functions (`sdf_union`,
  `sdf_smooth_union`, `sdf_intersect`, `sdf_subtract`, `sdf_negate`,
  `sdf_round`, `sdf_translate`, `sdf_twist`) and `sdf_gradient`.

## Installation

```
pip install .
```

## Example

```python
import numpy as np
from rendertoy.geometry import Triangle
from rendertoy.sampler import AliasTable
from rendertoy.microfacet import BeckmannDistribution, roughness_to_alpha

tri = Triangle(
    np.array([0.0, 0.0, 0.0]),
    np.array([1.0, 0.0, 0.0]),
    np.array([0.0, 1.0, 0.0]),
)
hit = tri.intersect(np.array([0.2, 0.2, 1.0]), np.array([0.0, 0.0, -1.0]))
if hit is not None:
    print(hit.t, hit.coord)

table = AliasTable([1.0, 2.0, 3.0])
index, pmf, u_remapped = table.sample(0.5)

alpha = roughness_to_alpha(0.3)
distribution = BeckmannDistribution(alpha, alpha)
wh = distribution.sample_wh(np.array([0.0, 0.0, 1.0]), np.array([0.3, 0.7]))
```

Functions that draw random numbers take an optional `rng`: any object
with a `random()` method returning a float in `[0, 1)`, such as a
`numpy.random.Generator` or a `random.Random`. Pass one to make results
reproducible; without it a module-wide numpy generator is used.

## What the package does not do

This is a library of components, not a renderer. It has no scene
description, acceleration structure, camera, materials or BSDFs, light
sources, render loop, image loading or saving, and no command-line
program. Triangle meshes, animation and sphere tracing of SDF primitives
are not included; the SDF helpers only build and combine distance
functions.

## Running the tests

```
pip install .[test]
pytest
```