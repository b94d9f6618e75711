from .poll_config import PollConfig as PollConfig
from .poll_result import PollOutcome as PollOutcome, PollResult as PollResult
from .poller import Poller as Poller
