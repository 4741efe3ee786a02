from jsonapi_invoker import ExceptionMapper, exception_mapper
from jsonapi_invoker.core.responses import ErrorResponse


class ArticleLockedError(Exception):
    pass


@exception_mapper(ArticleLockedError)
class ArticleLockedMapper(ExceptionMapper[ArticleLockedError]):
    def to_error_response(self, exc: ArticleLockedError) -> ErrorResponse:
        error = self.error_builder.error_object(
            status="423", code="article_locked", title="Locked", detail=str(exc)
        )
        return ErrorResponse(errors=[error], status=423)
