# harvest/core/tasks/factory.py
import inspect
from typing import Any, Dict, Iterable, List, Mapping, Optional, Type, Union

from harvest.config import DEFAULT_ANIMAL_ACTIONS, TASK_KIND_ANIMAL, TASK_KIND_BASIC
from .animal_task import AnimalTask
from .errors import TaskTypeError, UnknownTaskKindError
from .task import TASK_CAPABILITIES, Task, TaskConfig

# --- Define Class Mapping at Module Level ---
TASK_CLASS_MAP: Dict[str, Type[Any]] = {
    TASK_KIND_BASIC: Task,
    TASK_KIND_ANIMAL: AnimalTask,
}

def missing_capabilities(task_class: Any) -> List[str]:
    """Names from TASK_CAPABILITIES that `task_class` does not provide as callables."""
    return [name for name in TASK_CAPABILITIES if not callable(getattr(task_class, name, None))]

class TaskFactory:
    """Factory class for creating tasks from a kind name and configuration."""

    @staticmethod
    def register_task_type(kind: str, task_class: Any) -> None:
        """Adds or replaces the class used for `kind`."""
        if not inspect.isclass(task_class):
            raise TaskTypeError(f"Task type '{kind}' must be registered with a class, got {task_class!r}")
        missing = missing_capabilities(task_class)
        if missing:
            raise TaskTypeError(
                f"{task_class.__name__} cannot be registered as '{kind}': missing {', '.join(missing)}"
            )
        TASK_CLASS_MAP[kind] = task_class

    @staticmethod
    def unregister_task_type(kind: str) -> bool:
        return TASK_CLASS_MAP.pop(kind, None) is not None

    @staticmethod
    def create_task(kind: str, task_id: str, config: Optional[Mapping[str, Any]] = None) -> Any:
        """
        Builds a new task of `kind`.

        Keys in `config` that the constructor does not accept are kept in the
        task's metadata rather than rejected, so catalog records can carry
        extra content (estimated time, difficulty...).
        """
        task_class = TASK_CLASS_MAP.get(kind)
        if task_class is None:
            raise UnknownTaskKindError(kind)

        fields = dict(config or {})
        fields.pop("id", None)
        fields.pop("task_id", None)
        fields.pop("type", None)
        fields["kind"] = kind

        sig = inspect.signature(task_class.__init__)
        has_kwargs = any(p.kind == p.VAR_KEYWORD for p in sig.parameters.values())
        accepted = set(sig.parameters.keys())
        if has_kwargs:
            # Parameters consumed further up the hierarchy via **kwargs
            accepted |= set(inspect.signature(Task.__init__).parameters.keys())

        valid_kwargs: Dict[str, Any] = {}
        extra_metadata: Dict[str, Any] = {}
        for key, value in fields.items():
            if key in accepted and key != "self":
                valid_kwargs[key] = value
            else:
                extra_metadata[key] = value

        if extra_metadata and "metadata" in accepted:
            merged = dict(valid_kwargs.get("metadata") or {})
            merged.update(extra_metadata)
            valid_kwargs["metadata"] = merged

        return task_class(task_id, **valid_kwargs)

    @staticmethod
    def create_from_config(config: TaskConfig) -> Any:
        return TaskFactory.create_task(config.kind, config.task_id, config.fields)

    @staticmethod
    def create_animal_task(animal_name: str, **overrides: Any) -> AnimalTask:
        config: Dict[str, Any] = {
            "animal_name": animal_name,
            "title": f"Care for {animal_name}",
            "description": f"Feed and talk to {animal_name}",
            "required_actions": list(DEFAULT_ANIMAL_ACTIONS),
        }
        config.update(overrides)
        return TaskFactory.create_task(TASK_KIND_ANIMAL, animal_name, config)

    @staticmethod
    def create_tasks_from_config(configs: Iterable[Union[TaskConfig, Mapping[str, Any]]]) -> List[Any]:
        """
        Builds one task per record, in order. Raises on the first bad record;
        callers that want to skip bad records build them one at a time.
        """
        tasks = []
        for config in configs:
            if not isinstance(config, TaskConfig):
                config = TaskConfig.from_dict(config)
            tasks.append(TaskFactory.create_from_config(config))
        return tasks

    @staticmethod
    def get_registered_types() -> List[str]:
        return list(TASK_CLASS_MAP.keys())

    @staticmethod
    def is_type_registered(kind: str) -> bool:
        return kind in TASK_CLASS_MAP

    @staticmethod
    def get_task_class(kind: str) -> Optional[Type[Any]]:
        return TASK_CLASS_MAP.get(kind)
