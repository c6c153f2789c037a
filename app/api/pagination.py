from typing import Annotated

from fastapi import Query

LimitParam = Annotated[int, Query(ge=1, le=100)]
OffsetParam = Annotated[int, Query(ge=0)]
CategoryFilterParam = Annotated[int | None, Query(gt=0)]
LocationFilterParam = Annotated[str | None, Query(min_length=1, max_length=100)]
