import pytest

from greenlight.applications.interfaces.dtos.envelope import MessageEnvelope
from greenlight.applications.interfaces.dtos.movie import MovieInput, MoviePublic
from greenlight.applications.use_cases.movie.create_movie import CreateMovieUseCase
from greenlight.applications.use_cases.movie.delete_movie import DeleteMovieUseCase
from greenlight.applications.use_cases.movie.get_movie import GetMovieUseCase
from greenlight.applications.use_cases.movie.get_movies import GetMoviesUseCase
from greenlight.applications.use_cases.movie.update_movie import UpdateMovieUseCase
from greenlight.domain.exceptions import EditConflictError, FailedValidationError, NotFoundError
from greenlight.domain.models.runtime import Runtime

from .factories import movie_factory


class TestCreateMovieUseCase:
    @pytest.fixture
    def movie_input(self):
        """Sample movie input data"""
        return MovieInput(title="Moana", year=2016, runtime=Runtime(107), genres=["animation", "adventure"])

    @pytest.fixture
    def create_movie_use_case(self, mock_movie_repository):
        return CreateMovieUseCase(mock_movie_repository)

    @pytest.mark.asyncio
    async def test_create_movie_success(self, create_movie_use_case, mock_movie_repository, movie_input):
        mock_movie_repository.insert.return_value = movie_factory.create_domain_movie(id=1)

        result = await create_movie_use_case.execute(movie_input)

        assert isinstance(result, MoviePublic)
        assert result.id == 1
        assert result.version == 1
        assert result.runtime == 107

        inserted = mock_movie_repository.insert.call_args.args[0]
        assert inserted.id is None
        assert inserted.title == "Moana"
        assert inserted.genres == ["animation", "adventure"]

    @pytest.mark.asyncio
    async def test_invalid_input_never_reaches_the_store(self, create_movie_use_case, mock_movie_repository):
        with pytest.raises(FailedValidationError) as exc_info:
            await create_movie_use_case.execute(MovieInput(title="Moana"))

        assert exc_info.value.errors == {
            "year": "must be provided",
            "runtime": "must be provided",
            "genres": "must be provided",
        }
        mock_movie_repository.insert.assert_not_called()

    @pytest.mark.asyncio
    async def test_store_without_identity_is_an_error(
        self, create_movie_use_case, mock_movie_repository, movie_input
    ):
        mock_movie_repository.insert.return_value = movie_factory.create_domain_movie(id=None)

        with pytest.raises(RuntimeError, match="Movie creation failed"):
            await create_movie_use_case.execute(movie_input)


class TestReadMovieUseCases:
    @pytest.mark.asyncio
    async def test_get_movie(self, mock_movie_repository):
        mock_movie_repository.get.return_value = movie_factory.create_domain_movie(id=3, version=4)

        result = await GetMovieUseCase(mock_movie_repository).execute(3)

        assert result.id == 3
        assert result.version == 4
        mock_movie_repository.get.assert_awaited_once_with(3)

    @pytest.mark.asyncio
    async def test_get_movie_not_found_propagates(self, mock_movie_repository):
        mock_movie_repository.get.side_effect = NotFoundError()

        with pytest.raises(NotFoundError):
            await GetMovieUseCase(mock_movie_repository).execute(3)

    @pytest.mark.asyncio
    async def test_get_movies(self, mock_movie_repository):
        mock_movie_repository.get_all.return_value = [
            movie_factory.create_domain_movie(id=1),
            movie_factory.create_domain_movie(id=2, title="Up"),
        ]

        result = await GetMoviesUseCase(mock_movie_repository).execute()

        assert [movie.id for movie in result] == [1, 2]
        assert result[1].title == "Up"


class TestUpdateMovieUseCase:
    @pytest.fixture
    def existing_movie(self):
        return movie_factory.create_domain_movie(id=5, version=2)

    @pytest.fixture
    def update_movie_use_case(self, mock_movie_repository, existing_movie):
        mock_movie_repository.get.return_value = existing_movie
        mock_movie_repository.update.side_effect = lambda movie: movie.model_copy(
            update={"version": movie.version + 1}
        )
        return UpdateMovieUseCase(mock_movie_repository)

    @pytest.mark.asyncio
    async def test_partial_update_keeps_other_fields(self, update_movie_use_case, mock_movie_repository):
        result = await update_movie_use_case.execute(5, MovieInput(title="Moana 2"))

        assert result.title == "Moana 2"
        assert result.year == 2016
        assert result.genres == ["animation", "adventure"]
        assert result.version == 3

        sent = mock_movie_repository.update.call_args.args[0]
        assert sent.version == 2

    @pytest.mark.asyncio
    async def test_matching_expected_version(self, update_movie_use_case):
        result = await update_movie_use_case.execute(5, MovieInput(year=2017), expected_version="2")

        assert result.year == 2017

    @pytest.mark.asyncio
    async def test_stale_expected_version_conflicts(self, update_movie_use_case, mock_movie_repository):
        with pytest.raises(EditConflictError):
            await update_movie_use_case.execute(5, MovieInput(year=2017), expected_version="1")

        mock_movie_repository.update.assert_not_called()

    @pytest.mark.asyncio
    async def test_non_numeric_expected_version_conflicts(self, update_movie_use_case):
        with pytest.raises(EditConflictError):
            await update_movie_use_case.execute(5, MovieInput(year=2017), expected_version="two")

    @pytest.mark.asyncio
    async def test_invalid_merge_is_rejected(self, update_movie_use_case, mock_movie_repository):
        with pytest.raises(FailedValidationError) as exc_info:
            await update_movie_use_case.execute(5, MovieInput(genres=["drama", "drama"]))

        assert exc_info.value.errors == {"genres": "must not contain duplicate values"}
        mock_movie_repository.update.assert_not_called()

    @pytest.mark.asyncio
    async def test_store_conflict_propagates(self, update_movie_use_case, mock_movie_repository):
        mock_movie_repository.update.side_effect = EditConflictError()

        with pytest.raises(EditConflictError):
            await update_movie_use_case.execute(5, MovieInput(title="Up"))

    @pytest.mark.asyncio
    async def test_missing_movie(self, update_movie_use_case, mock_movie_repository):
        mock_movie_repository.get.side_effect = NotFoundError()

        with pytest.raises(NotFoundError):
            await update_movie_use_case.execute(99, MovieInput(title="Up"))


class TestDeleteMovieUseCase:
    @pytest.mark.asyncio
    async def test_delete_movie(self, mock_movie_repository):
        result = await DeleteMovieUseCase(mock_movie_repository).execute(4)

        assert result == MessageEnvelope(message="movie successfully deleted")
        mock_movie_repository.delete.assert_awaited_once_with(4)

    @pytest.mark.asyncio
    async def test_delete_missing_movie(self, mock_movie_repository):
        mock_movie_repository.delete.side_effect = NotFoundError()

        with pytest.raises(NotFoundError):
            await DeleteMovieUseCase(mock_movie_repository).execute(4)
