"""
Stock classification and valuation.

Everything here is recomputed from the rows handed in; nothing is cached
or persisted.
"""
from decimal import Decimal

LOW = 'low'
OK = 'ok'


def is_low_stock(quantity_on_hand, reorder_threshold):
    return quantity_on_hand <= reorder_threshold


def stock_status(item):
    """'low' when the item is at or below its reorder threshold, else 'ok'"""
    return LOW if is_low_stock(item.quantity_on_hand, item.reorder_threshold) else OK


def stock_valuation(items):
    """Sum of quantity on hand times unit cost over ``items``"""
    return sum(
        (Decimal(item.quantity_on_hand) * Decimal(item.unit_cost) for item in items),
        Decimal('0'),
    )


def summarize_stock(items):
    """
    Build the stock overview: totals plus one group per category.

    ``items`` should already have their category loaded.
    """
    items = list(items)
    groups = {}
    for item in items:
        group = groups.setdefault(item.category_id, {
            'category_id': item.category_id,
            'category_name': item.category.name,
            'item_count': 0,
            'low_count': 0,
            'valuation': Decimal('0'),
        })
        group['item_count'] += 1
        if stock_status(item) == LOW:
            group['low_count'] += 1
        group['valuation'] += Decimal(item.quantity_on_hand) * Decimal(item.unit_cost)

    return {
        'item_count': len(items),
        'low_count': sum(1 for item in items if stock_status(item) == LOW),
        'valuation': stock_valuation(items),
        'categories': sorted(groups.values(), key=lambda g: g['category_name']),
    }
