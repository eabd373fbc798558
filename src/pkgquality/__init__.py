"""Package quality estimation from repository, download and version signals."""

__version__ = "0.1.0"

from pkgquality.analyzers.pipeline import QualityPipeline  # noqa: E402
from pkgquality.config import EstimationContext, Settings  # noqa: E402

__all__ = ["EstimationContext", "QualityPipeline", "Settings", "__version__"]
