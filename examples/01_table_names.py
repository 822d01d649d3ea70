"""
Example 01: Table Names

This example shows how RowModel resolves table names: a bare string, a
custom table_name(), a context-dependent table_name_for(ctx), and the
tableized type name.
"""

from dataclasses import dataclass

from row_model import Context, Model


@dataclass
class Person:
    """Tableized by convention to 'people'"""
    id: int = 0
    name: str = ""


@dataclass
class LegacyUser:
    """Maps onto an old table name"""
    id: int = 0

    @classmethod
    def table_name(cls) -> str:
        return "tbl_user"


@dataclass
class Invoice:
    """Lives in one schema per tenant"""
    id: int = 0

    def table_name_for(self, ctx: Context) -> str:
        return f"{ctx.value('tenant', 'public')}.invoices"


def main():
    print("=== Table Names ===\n")

    print("1. Explicit string:")
    print(f"   {Model('audit_log').table_name()}\n")

    print("2. Convention:")
    print(f"   Person -> {Model(Person()).table_name()}")
    print(f"   [Person, Person] -> {Model([Person(), Person()]).table_name()}\n")

    print("3. Custom table_name():")
    print(f"   LegacyUser -> {Model(LegacyUser()).table_name()}\n")

    print("4. Context-dependent table_name_for(ctx):")
    for tenant in ("acme", "globex"):
        ctx = Context().with_value("tenant", tenant)
        model = Model(Invoice(), ctx)
        print(f"   {tenant}: {model.table_name()} (alias {model.alias()})")
    print(f"   no context: {Model(Invoice()).table_name()}")


if __name__ == "__main__":
    main()
