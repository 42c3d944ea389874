from typing import Annotated

from fastapi import Depends, Query

from agora.database import AsyncSession, get_session

SessionDep = Annotated[AsyncSession, Depends(get_session)]

LimitQuery = Annotated[int, Query(ge=1, le=200)]
OffsetQuery = Annotated[int, Query(ge=0)]
