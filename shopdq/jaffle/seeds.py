"""Raw jaffle_shop and stripe rows used to build the demo warehouse."""

from datetime import date, datetime

SEED_COLUMNS = {
    "raw_customers": (
        ("id", "INTEGER"),
        ("first_name", "VARCHAR"),
        ("last_name", "VARCHAR"),
    ),
    "raw_orders": (
        ("id", "INTEGER"),
        ("user_id", "INTEGER"),
        ("order_date", "DATE"),
        ("status", "VARCHAR"),
    ),
    "raw_payments": (
        ("id", "INTEGER"),
        ("orderid", "INTEGER"),
        ("paymentmethod", "VARCHAR"),
        ("status", "VARCHAR"),
        ("amount", "INTEGER"),
        ("created", "DATE"),
        ("_batched_at", "TIMESTAMP"),
    ),
}

CUSTOMERS = [
    (1, "Michael", "P."),
    (2, "Shawn", "M."),
    (3, "Kathleen", "P."),
    (4, "Jimmy", "C."),
    (5, "Katherine", "R."),
    (6, "Sarah", "R."),
    (7, "Martin", "M."),
    (8, "Frank", "R."),
    (9, "Jennifer", "F."),
    (10, "Henry", "W."),
]

ORDERS = [
    (1, 1, date(2018, 1, 1), "returned"),
    (2, 3, date(2018, 1, 2), "completed"),
    (3, 9, date(2018, 1, 4), "completed"),
    (4, 7, date(2018, 1, 5), "completed"),
    (5, 1, date(2018, 1, 5), "completed"),
    (6, 5, date(2018, 1, 7), "completed"),
    (7, 8, date(2018, 1, 9), "completed"),
    (8, 2, date(2018, 1, 11), "returned"),
    (9, 6, date(2018, 1, 12), "completed"),
    (10, 3, date(2018, 1, 14), "placed"),
    (11, 4, date(2018, 1, 15), "shipped"),
    (12, 10, date(2018, 1, 17), "completed"),
]

PAYMENTS = [
    (1, 1, "credit_card", "success", 1000, date(2018, 1, 1), datetime(2018, 1, 1, 8, 0)),
    (2, 2, "credit_card", "success", 2000, date(2018, 1, 2), datetime(2018, 1, 2, 8, 0)),
    (3, 3, "coupon", "success", 100, date(2018, 1, 4), datetime(2018, 1, 4, 8, 0)),
    (4, 4, "coupon", "success", 2500, date(2018, 1, 5), datetime(2018, 1, 5, 8, 0)),
    (5, 5, "bank_transfer", "success", 1700, date(2018, 1, 5), datetime(2018, 1, 5, 8, 0)),
    (6, 6, "credit_card", "success", 600, date(2018, 1, 7), datetime(2018, 1, 7, 8, 0)),
    (7, 7, "credit_card", "success", 1600, date(2018, 1, 9), datetime(2018, 1, 9, 8, 0)),
    (8, 8, "credit_card", "fail", 2300, date(2018, 1, 11), datetime(2018, 1, 11, 8, 0)),
    (9, 8, "gift_card", "success", 2300, date(2018, 1, 11), datetime(2018, 1, 11, 9, 0)),
    (10, 9, "bank_transfer", "success", 0, date(2018, 1, 12), datetime(2018, 1, 12, 8, 0)),
    (11, 10, "credit_card", "success", 2600, date(2018, 1, 14), datetime(2018, 1, 14, 8, 0)),
    (12, 11, "gift_card", "success", 1500, date(2018, 1, 15), datetime(2018, 1, 15, 8, 0)),
]

SEEDS = {
    "raw_customers": CUSTOMERS,
    "raw_orders": ORDERS,
    "raw_payments": PAYMENTS,
}
