import pytest

from jsonapi_invoker import ExceptionMapper, exception_mapper
from jsonapi_invoker.core.errors import (
    BadRequestError,
    ConflictError,
    JSONAPIError,
    JSONAPIErrorBuilder,
    ResourceNotFoundError,
)
from jsonapi_invoker.core.responses import ErrorResponse
from jsonapi_invoker.errorhandling import (
    ExceptionMapperRegistry,
    ExceptionMapperRegistryBuilder,
    JSONAPIExceptionMapper,
)
from jsonapi_invoker.errorhandling.mapper import is_exception_mapper

from tests.helpers import SEARCH_PACKAGE
from tests.sample_resources.errors import ArticleLockedError, ArticleLockedMapper


class QuotaError(Exception):
    pass


class DailyQuotaError(QuotaError):
    pass


@exception_mapper(QuotaError)
class QuotaMapper(ExceptionMapper[QuotaError]):
    def to_error_response(self, exc):
        return ErrorResponse([self.error_builder.error_object(status="429", title="Quota")], 429)


def test_decorator_marks_mapper():
    assert QuotaMapper.exception_class is QuotaError
    assert is_exception_mapper(QuotaMapper)
    assert not is_exception_mapper(ExceptionMapper)

    class Subclass(QuotaMapper):
        pass

    assert not is_exception_mapper(Subclass)


def test_registry_finds_nearest_mapper():
    registry = ExceptionMapperRegistry([JSONAPIExceptionMapper(), QuotaMapper()])

    assert isinstance(registry.find_mapper(DailyQuotaError), QuotaMapper)
    assert isinstance(registry.find_mapper(ConflictError), JSONAPIExceptionMapper)
    assert registry.find_mapper(KeyError) is None
    assert registry.exception_classes == [JSONAPIError, QuotaError]


def test_registering_twice_replaces_mapper():
    first, second = QuotaMapper(), QuotaMapper()
    registry = ExceptionMapperRegistry([first, second])
    assert registry.find_mapper(QuotaError) is second


def test_unmapped_exception_has_no_response():
    assert ExceptionMapperRegistry().to_error_response(RuntimeError("boom")) is None


def test_default_mapper_uses_exception_fields():
    response = JSONAPIExceptionMapper().to_error_response(
        BadRequestError("bad sort", code="invalid_sort", source={"parameter": "sort"})
    )
    assert response.status == 400
    assert response.errors == [
        {
            "status": "400",
            "code": "invalid_sort",
            "title": "Bad Request",
            "detail": "bad sort",
            "source": {"parameter": "sort"},
        }
    ]


def test_status_can_be_overridden_per_instance():
    error = ResourceNotFoundError("gone", status=410)
    assert error.status == 410
    assert ResourceNotFoundError.status == 404
    assert str(error) == "gone"


def test_error_without_detail_uses_title():
    error = ConflictError()
    assert str(error) == "Conflict"
    assert JSONAPIErrorBuilder().from_exception(error) == {"status": "409", "title": "Conflict"}


def test_empty_error_object_is_rejected():
    with pytest.raises(ValueError):
        JSONAPIErrorBuilder().error_object()


def test_builder_scans_mappers():
    registry = ExceptionMapperRegistryBuilder().build(SEARCH_PACKAGE)

    assert isinstance(registry.find_mapper(ArticleLockedError), ArticleLockedMapper)
    assert isinstance(registry.find_mapper(BadRequestError), JSONAPIExceptionMapper)


def test_scanned_mapper_response():
    registry = ExceptionMapperRegistryBuilder().build(SEARCH_PACKAGE)
    response = registry.to_error_response(ArticleLockedError("locked"))
    assert response.status == 423
    assert response.errors[0]["code"] == "article_locked"


def test_base_mapper_is_abstract():
    with pytest.raises(NotImplementedError):
        ExceptionMapper().to_error_response(RuntimeError())
