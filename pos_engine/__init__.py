# pos_engine
#
# Order pricing, refund reconciliation and sales/shift aggregation
# for a retail point-of-sale suite.

__version__ = "1.0.0"
