"""Run the reusable router integration suite against TrieRouter."""

from perch.routing.router import TrieRouter
from perch.testing import ImplicitMethodsIntegrationTests


class TestTrieRouterImplicitMethods(ImplicitMethodsIntegrationTests):
    def get_router(self) -> TrieRouter:
        return TrieRouter()
