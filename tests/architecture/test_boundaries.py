from pytest_archon import archrule


def test_compiler_is_engine_independent() -> None:
    """
    Filter and statement compilation must not depend on SQLAlchemy; it is
    only used at the execution boundary.
    """
    (
        archrule("compiler_without_sqlalchemy")
        .match("rowguard.compiler*")
        .match("rowguard.dialects*")
        .match("rowguard.statements")
        .match("rowguard.ddl")
        .should_not_import("sqlalchemy*")
        .check("rowguard", skip_type_checking=True)
    )


def test_policy_layers_are_engine_independent() -> None:
    (
        archrule("policies_without_sqlalchemy")
        .match("rowguard.rls*")
        .match("rowguard.tenancy")
        .should_not_import("sqlalchemy*")
        .check("rowguard", skip_type_checking=True)
    )


def test_compiler_does_not_execute() -> None:
    """Compilation layers never reach into execution or the gateway."""
    (
        archrule("compiler_is_pure")
        .match("rowguard.compiler*")
        .match("rowguard.statements")
        .match("rowguard.rls*")
        .match("rowguard.tenancy")
        .should_not_import("rowguard.execution*")
        .should_not_import("rowguard.gateway")
        .should_not_import("rowguard.query")
        .check("rowguard", skip_type_checking=True)
    )


def test_rls_does_not_depend_on_access() -> None:
    (
        archrule("rls_below_access")
        .match("rowguard.rls*")
        .should_not_import("rowguard.access")
        .should_not_import("rowguard.config")
        .check("rowguard", skip_type_checking=True)
    )
