from pydantic import BaseModel, Field


class ImportRowError(BaseModel):
    row: int  # 1-based data row, header excluded
    error: str


class ImportReport(BaseModel):
    total: int = 0
    imported: int = 0
    failed: int = 0
    profile_ids: list[str] = Field(default_factory=list)
    errors: list[ImportRowError] = Field(default_factory=list)


class CategoryRequest(BaseModel):
    name: str


class DeleteResponse(BaseModel):
    deleted: bool
    id: str
