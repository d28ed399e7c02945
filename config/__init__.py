from .pipeline import PipelineConfig
from .settings import *  # noqa: F401,F403
