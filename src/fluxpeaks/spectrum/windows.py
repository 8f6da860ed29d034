"""Window coefficients and amplitude correction."""

import numpy as np
from scipy.signal import get_window

from ..errors import PreconditionError, ensure_positive

# Public name -> scipy window name
WINDOW_TYPES: dict[str, str] = {
    "hamming": "hamming",
    "hann": "hann",
    "blackman": "blackman",
    "rectangular": "boxcar",
}


def window_coefficients(name, size):
    """Symmetric window of the given type and length.

    Symmetric (``fftbins=False``) so the curve is centred on the frame, e.g.
    Hamming is ``0.54 - 0.46 cos(2 pi n / (size - 1))``.
    """
    ensure_positive(size, "size")
    try:
        scipy_name = WINDOW_TYPES[name]
    except KeyError:
        raise PreconditionError(
            f"Unknown window: {name}. Use one of: {sorted(WINDOW_TYPES)}"
        ) from None
    return get_window(scipy_name, size, fftbins=False)


def signal_scale_factor(coefficients):
    """Amplitude correction for a window: inverse of its mean coefficient."""
    coefficients = np.asarray(coefficients, dtype=np.float64)
    total = float(np.sum(coefficients))
    if total <= 0:
        raise PreconditionError("Window coefficients must have a positive sum")
    return len(coefficients) / total
