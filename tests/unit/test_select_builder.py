"""Unit tests for the SELECT builder."""

import pytest
from pydantic import ValidationError

from tablequery.common.exceptions import ErrorCode, TableQueryError
from tablequery.constants.sql import SortOrder
from tablequery.query_builder import KeyedSelectBuilder, SelectBuilder, define_table
from tablequery.schema import TableSchema
from tablequery.settings import TableQuerySettings


ORDER_COLUMNS = "orders.id, orders.customer_id, orders.address_id, orders.order_status, orders.created_at"


def squash(sql: str) -> str:
    return " ".join(sql.split())


class TestSelectRendering:
    """Test clause rendering and ordering."""

    def test_select_renders_all_columns_in_declaration_order(self, orders):
        """A bare select() lists every qualified column and has no trailing clauses."""
        assert orders.select().build() == f"SELECT {ORDER_COLUMNS}\nFROM orders"

    def test_select_without_columns_uses_star(self, settings):
        table = define_table("events", [], settings=settings)
        assert table.select().build() == "SELECT *\nFROM events"

    def test_where_conditions_follow_call_order(self, orders):
        sql = (
            orders.select()
            .where_column("order_status", "PENDING")
            .where_column("customer_id", 7)
            .build()
        )
        assert sql.endswith(
            "\nWHERE orders.order_status = 'PENDING' AND orders.customer_id = '7'"
        )

    def test_full_clause_order(self, orders):
        sql = (
            orders.select()
            .limit(10)
            .order_by_column_desc("created_at")
            .having_str("COUNT(*) > 1")
            .group_by_column("customer_id")
            .where_column("order_status", "PENDING")
            .left_join_by_column("customer_id", "customers", "id")
            .build()
        )
        assert sql == (
            f"SELECT {ORDER_COLUMNS}\n"
            "FROM orders\n"
            "LEFT JOIN customers ON customers.id = orders.customer_id\n"
            "WHERE orders.order_status = 'PENDING'\n"
            "GROUP BY orders.customer_id\n"
            "HAVING COUNT(*) > 1\n"
            "ORDER BY orders.created_at DESC\n"
            "LIMIT 10"
        )

    def test_having_conditions_are_joined_with_and(self, orders):
        sql = (
            orders.select_column("customer_id")
            .group_by_column("customer_id")
            .having_column("order_status", "PENDING")
            .having_str("COUNT(*) > 2")
            .build()
        )
        assert sql.endswith("\nHAVING orders.order_status = 'PENDING' AND COUNT(*) > 2")

    def test_group_by_and_order_by_are_comma_separated(self, orders):
        sql = (
            orders.select()
            .group_by_column("customer_id")
            .group_by_str("orders.order_status")
            .order_by_column_asc("customer_id")
            .order_by_column("created_at", "DESC")
            .order_by_str("orders.id")
            .build()
        )
        assert "\nGROUP BY orders.customer_id, orders.order_status" in sql
        assert sql.endswith("\nORDER BY orders.customer_id ASC, orders.created_at DESC, orders.id")

    def test_order_by_accepts_sort_order_enum(self, orders):
        sql = orders.select().order_by_column("created_at", SortOrder.DESC).build()
        assert sql.endswith("ORDER BY orders.created_at DESC")

    def test_limit_overwrites_previous_value(self, orders):
        sql = orders.select().limit(5).limit(20).build()
        assert sql.endswith("\nLIMIT 20")
        assert "LIMIT 5" not in sql

    def test_limit_zero_is_rendered(self, orders):
        assert orders.select().limit(0).build().endswith("\nLIMIT 0")

    @pytest.mark.parametrize("bad_limit", [-1, "10", 2.5, True])
    def test_limit_rejects_invalid_values(self, orders, bad_limit):
        with pytest.raises(TableQueryError) as excinfo:
            orders.select().limit(bad_limit)
        assert excinfo.value.error_code == ErrorCode.INVALID_ARGUMENT

    def test_build_is_idempotent(self, orders):
        builder = orders.select().where_column("order_status", "PENDING").limit(3)
        assert builder.build() == builder.build()

    def test_str_renders_statement(self, orders):
        builder = orders.select().where_column("id", 1)
        assert str(builder) == builder.build()


class TestSelection:
    """Test select-list operations."""

    def test_select_column_appends_qualified_name(self, orders):
        sql = orders.select_column("id").select_column("order_status").build()
        assert sql.startswith("SELECT orders.id, orders.order_status\n")

    def test_select_column_as_wraps_in_parentheses(self, orders):
        sql = orders.select_column("id").select_column_as("order_status", "status").build()
        assert sql.startswith("SELECT orders.id, (orders.order_status) AS status\n")

    def test_aggregate_function_is_upper_cased(self, orders):
        sql = (
            orders.select_column("customer_id")
            .select_aggregate_over("id", "count")
            .select_aggregate_over_as("created_at", "max", "latest")
            .build()
        )
        assert sql.startswith(
            "SELECT orders.customer_id, COUNT(orders.id), MAX(orders.created_at) AS latest\n"
        )

    def test_raw_expressions(self, orders):
        sql = (
            orders.select()
            .select_expression("CONCAT_WS(' ', first_name, last_name) AS username")
            .select_expression_as("SELECT 1", "one")
            .select_aggregate_as("sum", "orders.id * 2", "doubled")
            .build()
        )
        assert squash(sql).startswith(
            f"SELECT {ORDER_COLUMNS}, CONCAT_WS(' ', first_name, last_name) AS username, "
            "(SELECT 1) AS one, SUM(orders.id * 2) AS doubled FROM orders"
        )

    @pytest.mark.parametrize(
        "factory, args, expected",
        [
            ("select_column", ("order_status",), "orders.order_status"),
            ("select_aggregate_over", ("id", "count"), "COUNT(orders.id)"),
            ("select_aggregate_over_as", ("id", "count", "total"), "COUNT(orders.id) AS total"),
            ("select_aggregate", ("count", "*"), "COUNT(*)"),
            ("select_aggregate_as", ("count", "*", "total"), "COUNT(*) AS total"),
            ("select_expression", ("NOW()",), "NOW()"),
            ("select_expression_as", ("NOW()", "ts"), "(NOW()) AS ts"),
        ],
    )
    def test_selective_factories_seed_a_single_expression(self, orders, factory, args, expected):
        builder = getattr(orders, factory)(*args)
        assert builder.selected == expected
        assert builder.build() == f"SELECT {expected}\nFROM orders"

    def test_qualified_column_names_are_accepted(self, orders):
        sql = orders.select_column("orders.id").where_column("orders.order_status", "NEW").build()
        assert sql == "SELECT orders.id\nFROM orders\nWHERE orders.order_status = 'NEW'"

    @pytest.mark.parametrize("blank", ["   ", "\n\t"])
    def test_blank_expression_seed_is_rejected(self, orders, blank):
        with pytest.raises(TableQueryError) as excinfo:
            orders.select_expression(blank)
        assert excinfo.value.error_code == ErrorCode.INVALID_ARGUMENT

    def test_blank_appended_expression_is_rejected(self, orders):
        with pytest.raises(TableQueryError) as excinfo:
            orders.select_column("id").select_expression("  ")
        assert excinfo.value.error_code == ErrorCode.INVALID_ARGUMENT

    def test_unknown_column_raises(self, orders):
        with pytest.raises(TableQueryError) as excinfo:
            orders.select().where_column("missing", 1)
        assert excinfo.value.error_code == ErrorCode.UNKNOWN_COLUMN
        assert excinfo.value.details == {"table": "orders", "column": "missing"}


class TestFilters:
    """Test WHERE operations."""

    def test_where_column_condition_inserts_operator_verbatim(self, orders):
        sql = (
            orders.select()
            .where_column_condition("order_status", "!=", "CANCELLED")
            .where_column_condition("created_at", ">", "2024-01-01")
            .where_column_condition("order_status", "LIKE", "PEND%")
            .build()
        )
        assert sql.endswith(
            "\nWHERE orders.order_status != 'CANCELLED' AND orders.created_at > '2024-01-01'"
            " AND orders.order_status LIKE 'PEND%'"
        )

    @pytest.mark.parametrize("blank", ["", "   ", "\n\t", [], ()])
    def test_where_column_in_blank_is_a_no_op(self, orders, blank):
        builder = orders.select().where_column("order_status", "PENDING")
        chained = builder.where_column_in("customer_id", blank)
        assert chained is builder
        assert chained.build() == builder.build()

    def test_where_column_in_raw_string(self, orders):
        sql = orders.select().where_column_in("customer_id", "1, 2, 3").build()
        assert sql.endswith("\nWHERE orders.customer_id IN (1, 2, 3)")

    def test_where_column_in_list_quotes_values(self, orders):
        sql = orders.select().where_column_in("order_status", ["NEW", "PENDING"]).build()
        assert sql.endswith("\nWHERE orders.order_status IN ('NEW', 'PENDING')")

    def test_where_column_in_set_is_rendered_deterministically(self, orders):
        sql = orders.select().where_column_in("order_status", {"PENDING", "NEW"}).build()
        assert sql.endswith("IN ('NEW', 'PENDING')")

    def test_where_column_in_accepts_any_iterable(self, orders):
        statuses = (status for status in ["NEW", "PENDING"])
        sql = orders.select().where_column_in("order_status", statuses).build()
        assert sql.endswith("\nWHERE orders.order_status IN ('NEW', 'PENDING')")

    def test_where_column_in_subquery_builder(self, orders, customers):
        subquery = customers.select_column("id").where_column_condition("mobile_number", "!=", "NULL")
        sql = orders.select().where_column_in("customer_id", subquery).build()
        assert sql == (
            f"SELECT {ORDER_COLUMNS}\n"
            "FROM orders\n"
            "WHERE orders.customer_id IN (SELECT customers.id\n"
            "FROM customers\n"
            "WHERE customers.mobile_number != 'NULL')"
        )

    def test_where_str_is_inserted_verbatim(self, orders):
        sql = (
            orders.select()
            .where_column("order_status", "NEW")
            .where_str("(orders.id > 10 OR orders.id < 2)")
            .build()
        )
        assert sql.endswith("WHERE orders.order_status = 'NEW' AND (orders.id > 10 OR orders.id < 2)")

    def test_values_are_not_escaped_by_default(self, orders):
        sql = orders.select().where_column("order_status", "O'Brien").build()
        assert sql.endswith("WHERE orders.order_status = 'O'Brien'")

    def test_escape_literals_doubles_quotes(self):
        settings = TableQuerySettings(_env_file=None, escape_literals=True)
        orders = define_table("orders", ["id", "order_status"], primary_key="id", settings=settings)
        sql = (
            orders.select()
            .where_column("order_status", "O'Brien")
            .where_column_in("id", ["a'b"])
            .build()
        )
        assert sql.endswith("WHERE orders.order_status = 'O''Brien' AND orders.id IN ('a''b')")


class TestJoins:
    """Test column-anchored and primary-key joins."""

    def test_column_anchored_joins(self, orders, customers):
        sql = (
            orders.select()
            .left_join_by_column("customer_id", customers, "id")
            .left_join_by_column("address_id", "addresses", "id")
            .build()
        )
        assert sql == (
            f"SELECT {ORDER_COLUMNS}\n"
            "FROM orders\n"
            "LEFT JOIN customers ON customers.id = orders.customer_id\n"
            "LEFT JOIN addresses ON addresses.id = orders.address_id"
        )

    @pytest.mark.parametrize(
        "method, keyword",
        [
            ("join_by_column", "JOIN"),
            ("inner_join_by_column", "INNER JOIN"),
            ("left_join_by_column", "LEFT JOIN"),
            ("right_join_by_column", "RIGHT JOIN"),
            ("full_join_by_column", "FULL JOIN"),
        ],
    )
    def test_column_anchored_join_keywords(self, orders, method, keyword):
        sql = getattr(orders.select_column("id"), method)("customer_id", "customers", "id").build()
        assert sql.endswith(f"\n{keyword} customers ON customers.id = orders.customer_id")

    @pytest.mark.parametrize(
        "method, keyword",
        [
            ("join", "JOIN"),
            ("inner_join", "INNER JOIN"),
            ("left_join", "LEFT JOIN"),
            ("right_join", "RIGHT JOIN"),
            ("full_join", "FULL JOIN"),
        ],
    )
    def test_primary_key_join_keywords(self, customers, method, keyword):
        sql = getattr(customers.select_column("id"), method)("orders", "customer_id").build()
        assert sql.endswith(f"\n{keyword} orders ON orders.customer_id = customers.id")

    def test_legacy_full_join_renders_right_join(self):
        settings = TableQuerySettings(_env_file=None, legacy_full_join=True)
        customers = define_table("customers", ["id"], primary_key="id", settings=settings)
        builder = customers.select_column("id")
        assert builder.full_join("orders", "customer_id").build().endswith(
            "\nRIGHT JOIN orders ON orders.customer_id = customers.id"
        )
        assert builder.full_join_by_column("id", "orders", "customer_id").build().endswith(
            "\nFULL JOIN orders ON orders.customer_id = customers.id"
        )

    def test_joins_keep_call_order_and_duplicates(self, orders):
        sql = (
            orders.select_column("id")
            .join_str("CROSS JOIN regions")
            .join("customers", "id")
            .join("customers", "id")
            .build()
        )
        assert sql == (
            "SELECT orders.id\n"
            "FROM orders\n"
            "CROSS JOIN regions\n"
            "JOIN customers ON customers.id = orders.id\n"
            "JOIN customers ON customers.id = orders.id"
        )

    def test_table_without_primary_key_has_no_key_joins(self, audit_log):
        builder = audit_log.select()
        assert type(builder) is SelectBuilder
        for method in ("join", "inner_join", "left_join", "right_join", "full_join"):
            assert not hasattr(builder, method)
        assert builder.join_by_column("event", "events", "name").build().endswith(
            "\nJOIN events ON events.name = audit_log.event"
        )

    def test_table_with_primary_key_gets_keyed_builder(self, orders):
        builder = orders.select().where_column("id", 1)
        assert isinstance(builder, KeyedSelectBuilder)

    def test_keyed_builder_requires_primary_key(self, settings):
        schema = TableSchema.from_columns("audit_log", ["event"])
        with pytest.raises(ValidationError, match="declares no primary key"):
            KeyedSelectBuilder(table_schema=schema, settings=settings, selected="*")


class TestAliasing:
    """Test alias suppression and self-joins."""

    def test_alias_equal_to_table_is_suppressed(self, settings):
        schema = TableSchema.from_columns("orders", ["id"], alias="orders")
        builder = SelectBuilder(table_schema=schema, settings=settings, selected="orders.id")
        assert builder.build() == "SELECT orders.id\nFROM orders"

    def test_alias_is_emitted_once_after_table(self, settings):
        orders = define_table("orders", ["id", "parent_id"], primary_key="id", alias="o", settings=settings)
        sql = orders.select().where_column("id", 3).build()
        assert sql == "SELECT o.id, o.parent_id\nFROM orders o\nWHERE o.id = '3'"
        assert squash(sql).count("orders o") == 1

    def test_self_join_through_alias(self, settings):
        child = define_table("orders", ["id", "parent_id"], primary_key="id", alias="child", settings=settings)
        sql = (
            child.select_column("id")
            .left_join_by_column("parent_id", "orders", "id")
            .select_expression("orders.id AS parent")
            .build()
        )
        assert sql == (
            "SELECT child.id, orders.id AS parent\n"
            "FROM orders child\n"
            "LEFT JOIN orders ON orders.id = child.parent_id"
        )

    def test_primary_key_join_uses_alias(self, settings):
        child = define_table("orders", ["id"], primary_key="id", alias="o", settings=settings)
        sql = child.select_column("id").inner_join("payments", "order_id").build()
        assert sql.endswith("\nINNER JOIN payments ON payments.order_id = o.id")


class TestCopyOnWrite:
    """Builders are values: chaining never changes the receiver."""

    def test_branches_render_independently(self, orders):
        base = orders.select().where_column("order_status", "PENDING")
        base_sql = base.build()

        recent = base.order_by_column_desc("created_at").limit(5)
        mine = base.where_column("customer_id", 42)

        assert base.build() == base_sql
        assert "customer_id = '42'" not in recent.build()
        assert "ORDER BY" not in mine.build()
        assert mine.where_conditions == (
            "orders.order_status = 'PENDING'",
            "orders.customer_id = '42'",
        )
        assert base.where_conditions == ("orders.order_status = 'PENDING'",)

    def test_builders_are_frozen(self, orders):
        builder = orders.select()
        with pytest.raises(ValidationError):
            builder.selected = "*"
