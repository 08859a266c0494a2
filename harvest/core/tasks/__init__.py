# harvest/core/tasks/__init__.py
"""
Task Tracking Package.
Task entities, the factory that builds them, the catalog of farm tasks and
the TaskManager that owns them for a game session.
"""
from .errors import TaskError, TaskTypeError, TaskValidationError, UnknownTaskKindError
from .events import TaskEventEmitter
from .task import TASK_CAPABILITIES, Task, TaskConfig, TaskStatus
from .animal_task import AnimalTask
from .factory import TaskFactory
from .catalog import TaskCatalog
from .manager import TaskManager
