from typing import NamedTuple, Optional, Union

Range = Union[int, tuple[int], tuple[int, int]]

MessageRange = Union[str, Range]


class Response(NamedTuple):
    code: int
    message: str

    @property
    def status(self) -> int:
        """The code class, 1 to 5."""
        return self.code // 100


class GroupState(NamedTuple):
    count: int
    first: int
    last: int
    name: Optional[str]
