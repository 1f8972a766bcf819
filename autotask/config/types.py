from dataclasses import dataclass, field


@dataclass
class TaskConfig:
    id: str
    program: str
    arguments: list[str] = field(default_factory=list)
    needs: list[str] = field(default_factory=list)


@dataclass
class ProjectConfig:
    # Insertion order is the declaration order of the task file
    tasks: dict[str, TaskConfig]

    def __iter__(self):
        yield from self.tasks.values()

    def __len__(self):
        return len(self.tasks)

    def has_task(self, id: str) -> bool:
        return id in self.tasks

    def get_task(self, id: str) -> TaskConfig:
        if not self.has_task(id):
            raise KeyError(id)

        return self.tasks[id]

    def tasks_ids(self) -> list[str]:
        return list(self.tasks.keys())


class ConfigError(Exception):
    def __init__(self, *args: object) -> None:
        super().__init__(*args)


class UnsupportedConfigFormatError(ConfigError):
    def __init__(self, *args: object) -> None:
        super().__init__(*args)
