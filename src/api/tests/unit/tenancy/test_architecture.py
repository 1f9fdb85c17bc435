"""Architecture tests for the tenancy bounded context using pytest-archon."""

from pytest_archon import archrule


class TestTenancyDomainLayerBoundaries:
    def test_domain_has_no_dependencies(self):
        """The tenant aggregate is plain Python."""
        (
            archrule("tenancy_domain_pure")
            .match("tenancy.domain*")
            .should_not_import(
                "tenancy.application*",
                "tenancy.infrastructure*",
                "infrastructure*",
                "fastapi*",
                "sqlalchemy*",
            )
            .check("tenancy")
        )


class TestTenancyApplicationLayerBoundaries:
    def test_application_does_not_import_infrastructure(self):
        """The registry receives its directory opener and connector."""
        (
            archrule("tenancy_application_no_infrastructure")
            .match("tenancy.application*")
            .should_not_import("tenancy.infrastructure*")
            .check("tenancy")
        )

    def test_application_does_not_import_web_framework(self):
        (
            archrule("tenancy_application_no_fastapi")
            .match("tenancy.application*")
            .should_not_import("fastapi*", "starlette*")
            .check("tenancy")
        )


class TestTenancyPresentationLayerBoundaries:
    def test_middleware_does_not_import_infrastructure(self):
        (
            archrule("tenancy_middleware_no_infrastructure")
            .match("tenancy.presentation.middleware")
            .should_not_import("tenancy.infrastructure*")
            .check("tenancy")
        )
