"""neural-layer: forward pass, MSE loss and backward pass of a single sigmoid layer."""

from .exceptions import PreconditionError, DimensionMismatchError, CapacityExceededError
from .config import DEFAULT_CONFIG, LEGACY_CAPACITY, resolve_config
from .scratch import ScratchBuffers, default_scratch
from .layer import forward, mse, backward, SigmoidLayer
from .train_demo import make_synthetic, train_layer
from .logger import configure_logging
