from .exchange_rate import RateFetchError, RateProvider, StaticRateProvider
from .sync import ProgressListener, SyncOrchestrator, SyncResult
