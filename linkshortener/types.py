from collections.abc import Callable
from datetime import datetime
from typing import Any


# Type aliases for Python dictionaries
type LambdaEvent = dict[str, Any]
type LambdaContext = Any
type LambdaResponse = dict[str, Any]
type AppConfig = dict[str, Any]
type Snapshot = dict[str, Any]

# Type aliases for injected collaborators
type Clock = Callable[[], datetime]
type ReachabilityCheck = Callable[[str], bool]
