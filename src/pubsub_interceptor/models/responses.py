"""Response body models returned by the interceptor."""

from pydantic import BaseModel, ConfigDict, Field


class BadRequestBody(BaseModel):
    """Structured 400 body emitted when an envelope fails validation."""

    model_config = ConfigDict(
        populate_by_name=True,
        json_schema_extra={
            'examples': [
                {
                    'error': 'Bad Request',
                    'statusCode': 400,
                    'message': ['Missing message field in request body'],
                }
            ]
        },
    )

    error: str = Field(default='Bad Request')
    status_code: int = Field(default=400, alias='statusCode')
    message: list[str] = Field(default_factory=list, description='One entry per violation')
