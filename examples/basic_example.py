"""
Basics — tags, handlers, and fluent chaining.

Instead of:
    i = multiply(i, 10)
    k = add(add(i, 2), 3)

You write:
    resolver.wrap(Ref(i)).apply(Multiply, 10)
    resolver.wrap(i).apply(Add, 2).apply(Add, 3).unwrapped
"""

from tagchain import Ref, analyze, explain
from examples._infra import banner, arithmetic, algorithms, Multiply, Add, Get


resolver = arithmetic.include(algorithms).compile()


def main() -> None:
    banner("Basics: Tag-Dispatched Chaining")

    print("\n1. Mutate a borrowed slot in place:")
    i = Ref(5)
    resolver.wrap(i).apply(Multiply, 10)
    print(f"   → i = {i.value}")

    print("\n2. Transform through a chain:")
    k = resolver.wrap(i.value).apply(Add, 2).apply(Add, 3).unwrapped
    j = resolver.wrap(9).apply(Add, 4).apply(Add, 5).unwrapped
    print(f"   → k = {k}, j = {j}")

    print("\n3. Parameterised tag:")
    print(f"   → Get(2) on (1, 2, 3) = {resolver.wrap((1, 2, 3)).apply(Get(2)).unwrapped}")

    print("\n4. Plan once, run many:")
    plan = resolver.chain().apply(Add, 2).apply(Add, 3).plan(int)
    print(f"   → {[plan(n).unwrapped for n in range(3)]}")

    print("\n5. Direct call:")
    print(f"   → Add(5, 2) = {resolver.call(Add, 5, 2)}")

    print("\n6. Inspect:")
    stats = analyze(resolver)
    print(f"   → {stats.declaration_count} handlers, tags {', '.join(stats.tags)}")
    for c in explain(resolver, Add, int, 1):
        mark = "*" if c.chosen else " "
        print(f"   {mark} {c.handler} ({c.tier.name})")


if __name__ == "__main__":
    main()
