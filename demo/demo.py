#!/usr/bin/env python3
"""
Demonstration of Instancer.

This demo shows:
1. Creating fully populated objects
2. Setting, supplying and generating values for selected fields
3. Scoped selectors
4. Delegating generators and subtype generation
5. Reusable models and streams
6. Configuration errors reported before generation
"""

import itertools
import uuid
from dataclasses import dataclass, field

from instancer import Instancer, InstancerApiError, Select, UnusedSelectorError

# Example domain: orders placed by customers


@dataclass
class Address:
    """Postal address."""

    street: str
    city: str
    postcode: str


@dataclass
class Customer:
    """A customer with billing and shipping addresses."""

    name: str
    email: str
    billing: Address
    shipping: Address


@dataclass
class Item:
    """An order line."""

    sku: str
    quantity: int
    price: float


@dataclass
class ExpressItem(Item):
    """An order line shipped overnight."""

    courier: str


class Order:
    """An order placed by a customer."""

    id: uuid.UUID
    customer: Customer
    items: list[Item]
    notes: dict[str, str]

    def get_id(self) -> uuid.UUID:
        return self.id


@dataclass
class Catalog:
    """Items grouped by category."""

    categories: dict[str, list[Item]] = field(default_factory=dict)


def main():
    """Main demo function."""
    print("=== Instancer Demo ===\n")

    print("1. Fully populated objects:")
    print("-" * 30)
    customer = Instancer.create(Customer)
    print(f"Customer: {customer}")

    print("\n2. Selected fields:")
    print("-" * 30)
    customer = (
        Instancer.of(Customer)
        .set(Select.field(Customer, "name"), "Ada Lovelace")
        .supply(Select.field(Customer, "email"), lambda: "ada@example.org")
        .generate(Select.field(Address, "postcode"), lambda gen: gen.strings().digits().length(5))
        .create()
    )
    print(f"Customer: {customer}")

    print("\n3. Scoped selectors:")
    print("-" * 30)
    customer = (
        Instancer.of(Customer)
        .set(Select.field(Address, "city").within(Select.scope(Customer, "shipping")), "Lisbon")
        .create()
    )
    print(f"Billing city: {customer.billing.city}, shipping city: {customer.shipping.city}")

    print("\n4. Delegating generators:")
    print("-" * 30)
    order = (
        Instancer.of(Order)
        .generate(Select.field(Order.get_id), lambda gen: gen.delegating())
        .generate(Select.field(Order, "items"), lambda gen: gen.collections().size(3))
        .generate(Select.all(Item), lambda gen: gen.delegating(ExpressItem))
        .generate(Select.field(Item, "quantity"), lambda gen: gen.ints().range(1, 5))
        .create()
    )
    print(f"Order {order.get_id()} for {order.customer.name}")
    for item in order.items:
        print(f"  {type(item).__name__}: {item}")

    print("\n5. Models and streams:")
    print("-" * 30)
    model = Instancer.of(Catalog).with_seed(2024).to_model()
    for catalog in itertools.islice(model.stream(), 2):
        print(f"Catalog with categories {sorted(catalog.categories)}")
    print(f"Seed: {model.seed}")

    print("\n6. Configuration errors:")
    print("-" * 30)
    try:
        Select.field(Customer, "phone")
    except InstancerApiError as e:
        print(f"Caught invalid field: {e}")

    try:
        Instancer.of(Item).set(Select.field(Customer, "name"), "unused").create()
    except UnusedSelectorError as e:
        print(f"Caught unused selector: {e}")

    print("\nDemo completed successfully!")


if __name__ == "__main__":
    main()
