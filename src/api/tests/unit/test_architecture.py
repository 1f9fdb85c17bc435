"""Architecture tests using pytest-archon.

These tests enforce the boundaries between bounded contexts and the
shared infrastructure.
"""

from pytest_archon import archrule


class TestSharedKernelBoundaries:
    """The shared kernel is used by every context and depends on none."""

    def test_shared_kernel_does_not_import_contexts(self):
        (
            archrule("shared_kernel_no_contexts")
            .match("shared_kernel*")
            .should_not_import("iam*", "tenancy*", "infrastructure*")
            .check("shared_kernel")
        )

    def test_shared_kernel_does_not_import_sqlalchemy_at_runtime(self):
        """The request context only names engines for type checking."""
        (
            archrule("shared_kernel_no_sqlalchemy")
            .match("shared_kernel*")
            .should_not_import("sqlalchemy*")
            .check("shared_kernel", skip_type_checking=True)
        )


class TestInfrastructureBoundaries:
    """Shared infrastructure must not reach into bounded contexts."""

    def test_infrastructure_dependencies_do_not_import_contexts(self):
        (
            archrule("infrastructure_dependencies_no_contexts")
            .match("infrastructure.dependencies*", "infrastructure.settings*")
            .should_not_import("iam*", "tenancy*")
            .check("infrastructure")
        )

    def test_database_layer_does_not_import_contexts(self):
        (
            archrule("infrastructure_database_no_contexts")
            .match("infrastructure.database*")
            .should_not_import("iam*", "tenancy*")
            .check("infrastructure")
        )


class TestContextBoundaries:
    """Tenancy and IAM only meet at their outer layers."""

    def test_iam_core_does_not_import_tenancy(self):
        """Principal resolution reads the request context, not the registry."""
        (
            archrule("iam_core_no_tenancy")
            .match("iam.domain*", "iam.ports*", "iam.application*")
            .should_not_import("tenancy*")
            .check("iam")
        )

    def test_tenancy_core_does_not_import_iam(self):
        (
            archrule("tenancy_core_no_iam")
            .match(
                "tenancy.domain*",
                "tenancy.ports*",
                "tenancy.application*",
                "tenancy.infrastructure*",
            )
            .should_not_import("iam*")
            .check("tenancy")
        )
