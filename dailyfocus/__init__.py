"""DailyFocus core library: daily records, metrics, focus timer, nightly prompt.

Public API re-exports for convenient imports:
    from dailyfocus import DailySession, DailyRecordStore, FocusTimer, ...
"""

# Workspace & settings
from dailyfocus.workspace import (
    Settings,
    workspace_root,
    load_settings,
    get_user_timezone,
    now_local,
    today_str,
    profile_path,
    store_dir,
)

# Dates
from dailyfocus.dates import date_key, parse_key, shift_key, previous_key

# Time sources
from dailyfocus.clock import Clock, Handle, SystemClock, VirtualClock

# Subscriptions
from dailyfocus.hooks import Hooks, Subscription

# Persistence
from dailyfocus.storage import (
    KeyValueBackend,
    MemoryBackend,
    FileBackend,
    PersistentStore,
)

# Records
from dailyfocus.records import DailyRecordStore

# Metrics
from dailyfocus.metrics import completion_percent, day_progress, qualifies, streak

# Timer
from dailyfocus.timer import FocusTimer, TimerDriver

# Prompt
from dailyfocus.prompt import NightlyPrompt, decide

# Session
from dailyfocus.session import DailySession

# Models
from dailyfocus.models import (
    TodoItem,
    Phase,
    TimerConfig,
    TimerState,
    DayProgress,
    Immediate,
    After,
    Suppressed,
    PromptDecision,
)
