class ChordalError(Exception):
    pass


class EpisodeFinished(ChordalError):
    def __init__(self, sequence: str):
        super().__init__(f"Episode for {sequence!r} has already finished.")
        self.sequence = sequence


class KeymapConflict(ChordalError):
    def __init__(self, sequence: str, reason: str):
        super().__init__(f"Cannot bind {sequence!r}: {reason}")
        self.sequence = sequence


class UnknownCommand(ChordalError):
    def __init__(self, command: str):
        super().__init__(f"No such command: {command!r}")
        self.command = command


class NotBound(ChordalError):
    def __init__(self, sequence: str):
        super().__init__(f"{sequence!r} is not bound.")
        self.sequence = sequence
