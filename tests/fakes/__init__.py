from tests.fakes.fake_geometry_provider import FakeGeometryProvider
from tests.fakes.fake_repository import FakeProjectRepository
from tests.fakes.samples import POEM, make_note

__all__ = ["POEM", "FakeGeometryProvider", "FakeProjectRepository", "make_note"]
