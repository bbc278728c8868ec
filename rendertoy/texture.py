"""Samplable textures: constants, flat colours and images addressed by UV."""

from __future__ import annotations

import abc
import enum
from typing import Any, Sequence

import numpy as np


class SampleMethod(enum.Enum):
    NEAREST_NEIGHBOUR = 0
    BILINEAR = 1


class Samplable(abc.ABC):
    """Something that yields a value for every ``(u, v)`` texture coordinate."""

    sample_method: SampleMethod = SampleMethod.NEAREST_NEIGHBOUR

    @abc.abstractmethod
    def sample(self, u: float, v: float) -> Any:
        """Value at texture coordinate ``(u, v)``."""

    def sample_uv(self, uv: Sequence[float]) -> Any:
        return self.sample(float(uv[0]), float(uv[1]))

    @abc.abstractmethod
    def avg(self) -> Any:
        """Average value over the whole texture."""


class ConstantNumerical(Samplable):
    def __init__(self, value: float) -> None:
        self.value = float(value)

    def sample(self, u: float, v: float) -> float:
        return self.value

    def avg(self) -> float:
        return self.value


class ColorTexture(Samplable):
    def __init__(self, color: Sequence[float]) -> None:
        self.color = np.asarray(color, dtype=float)

    def sample(self, u: float, v: float) -> np.ndarray:
        return self.color.copy()

    def avg(self) -> np.ndarray:
        return self.color.copy()


class ImageTexture(Samplable):
    """Texture over an image array of shape ``(height, width, channels)``.

    ``v`` runs upward: ``v = 1`` is the first row of the array.
    """

    def __init__(self, image: Any) -> None:
        data = np.asarray(image, dtype=float)
        if data.ndim != 3 or data.shape[0] == 0 or data.shape[1] == 0:
            raise ValueError("image must have shape (height, width, channels)")
        self.image = data

    @classmethod
    def blank(cls, width: int, height: int, channels: int = 4) -> "ImageTexture":
        return cls(np.zeros((height, width, channels)))

    @property
    def width(self) -> int:
        return self.image.shape[1]

    @property
    def height(self) -> int:
        return self.image.shape[0]

    def _pixel(self, x: int, y: int) -> np.ndarray:
        if not (0 <= x < self.width and 0 <= y < self.height):
            raise IndexError(f"pixel ({x}, {y}) outside {self.width}x{self.height} image")
        return self.image[y, x]

    def sample(self, u: float, v: float) -> np.ndarray:
        v = 1.0 - v
        fx = u * (self.width - 1)
        fy = v * (self.height - 1)
        x0, y0 = int(fx), int(fy)
        if self.sample_method is SampleMethod.NEAREST_NEIGHBOUR:
            return self._pixel(x0, y0).copy()

        tx, ty = fx - x0, fy - y0
        # The far neighbour only matters with a non-zero weight.
        x1 = x0 + 1 if tx > 0 else x0
        y1 = y0 + 1 if ty > 0 else y0
        c00 = self._pixel(x0, y0)
        c01 = self._pixel(x0, y1)
        c10 = self._pixel(x1, y0)
        c11 = self._pixel(x1, y1)
        return (
            (1.0 - tx) * (1.0 - ty) * c00
            + tx * (1.0 - ty) * c10
            + (1.0 - tx) * ty * c01
            + tx * ty * c11
        )

    def avg(self) -> np.ndarray:
        return self.image.mean(axis=(0, 1))