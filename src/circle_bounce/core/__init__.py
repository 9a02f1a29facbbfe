"""Physics core: no GUI dependencies."""

from .clock import SimulationClock  # noqa: F401
from .collision import CollisionResult, resolve_collision  # noqa: F401
from .config import PhysicsConfig  # noqa: F401
from .engine import PhysicsEngine  # noqa: F401
from .interaction import InteractionController  # noqa: F401
from .recording import (  # noqa: F401
    EncoderOptions,
    MediaArtifact,
    RecordingController,
    RecordingState,
)
from .scheduling import FrameScheduler, ManualScheduler  # noqa: F401
from .simulation import CircleSimulation, SimulationInitError  # noqa: F401
from .state import Ball, Boundary, SimulationMode, TextElement  # noqa: F401
from .trails import TrailBuffer  # noqa: F401
