"""Architecture tests for the IAM bounded context using pytest-archon."""

from pytest_archon import archrule


class TestIAMDomainLayerBoundaries:
    """Tests that the domain layer has no forbidden dependencies."""

    def test_domain_does_not_import_infrastructure(self):
        (
            archrule("iam_domain_no_infrastructure")
            .match("iam.domain*")
            .should_not_import("iam.infrastructure*", "infrastructure*")
            .check("iam")
        )

    def test_domain_does_not_import_application(self):
        (
            archrule("iam_domain_no_application")
            .match("iam.domain*")
            .should_not_import("iam.application*")
            .check("iam")
        )

    def test_domain_does_not_import_frameworks(self):
        """Principals and permissions are framework-agnostic."""
        (
            archrule("iam_domain_no_frameworks")
            .match("iam.domain*")
            .should_not_import("fastapi*", "starlette*", "sqlalchemy*", "jose*")
            .check("iam")
        )


class TestIAMApplicationLayerBoundaries:
    def test_application_does_not_import_infrastructure(self):
        """Resolvers receive repository openers instead of building them."""
        (
            archrule("iam_application_no_infrastructure")
            .match("iam.application*")
            .should_not_import("iam.infrastructure*", "infrastructure*")
            .check("iam")
        )

    def test_application_does_not_import_fastapi(self):
        (
            archrule("iam_application_no_fastapi")
            .match("iam.application*")
            .should_not_import("fastapi*", "starlette*")
            .check("iam")
        )


class TestIAMInfrastructureLayerBoundaries:
    def test_infrastructure_does_not_import_presentation(self):
        (
            archrule("iam_infrastructure_no_presentation")
            .match("iam.infrastructure*")
            .should_not_import("iam.presentation*", "iam.dependencies*")
            .check("iam")
        )
