"""Demonstrates numeric assertions on a decoded JSON payload.

* Numbers are decoded as `JSONNumber` so the exact wire text is compared.
* Each check returns the same `Number`, so checks can be chained.
* After the first failure the rest of the chain is skipped.
"""

import json

from jsonexpect import ConsoleReporter, DecodeTarget, JSONNumber, Number, Value

payload = json.loads(
    '{"order": {"id": 1042, "total": 59.90, "discount": 0.1, "items": [19.95, 39.95]}}',
    parse_float=JSONNumber,
)

reporter = ConsoleReporter()

# Passing checks
order = Value(reporter, payload).path("/order")
order.path("/id").number().gt(0).in_range(1, 10_000).not_in_list(0, -1)
order.path("/total").number().alias("total").in_delta(59.9, 0.001).schema({"multipleOf": 0.01})

target = DecodeTarget(int)
order.path("/id").number().decode(target)
print(f"decoded id: {target.value}")

# The wire text "0.1" is exact, the float 0.1 is not
Number(reporter, payload["order"]["discount"]).alias("discount").is_equal(0.1)

# Only the first failure of a chain is printed
Number(reporter, 42).alias("answer").lt(10).gt(100).is_equal(0)
