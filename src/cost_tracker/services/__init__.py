__all__ = [
    "record_store",
    "convert",
    "fetch_exchange_rates",
    "ExchangeRateProvider",
    "add_cost",
    "get_cost",
    "update_cost",
    "delete_cost",
    "get_all_costs",
    "get_costs_by_month",
    "get_costs_by_category",
    "get_costs_by_date_range",
    "filter_costs",
    "build_report",
    "build_yearly_report",
    "build_statistics",
    "get_categories",
    "add_category",
    "update_category",
    "delete_category",
    "get_category_view",
    "get_budget",
    "set_budget",
    "get_all_budgets",
    "delete_budget",
    "evaluate_budgets",
    "check_budgets",
    "get_savings_goals",
    "add_savings_goal",
    "update_savings_goal",
    "delete_savings_goal",
    "get_savings_progress",
]

from cost_tracker.services import record_store

from cost_tracker.services.currency_service import convert

from cost_tracker.services.exchange_rate_service import (
    fetch_exchange_rates,
    ExchangeRateProvider
)

from cost_tracker.services.cost_service import (
    add_cost,
    get_cost,
    update_cost,
    delete_cost
)

from cost_tracker.services.cost_query_service import (
    get_all_costs,
    get_costs_by_month,
    get_costs_by_category,
    get_costs_by_date_range,
    filter_costs
)

from cost_tracker.services.report_service import (
    build_report,
    build_yearly_report
)

from cost_tracker.services.statistics_service import build_statistics

from cost_tracker.services.category_service import (
    get_categories,
    add_category,
    update_category,
    delete_category,
    get_category_view
)

from cost_tracker.services.budget_service import (
    get_budget,
    set_budget,
    get_all_budgets,
    delete_budget,
    evaluate_budgets,
    check_budgets
)

from cost_tracker.services.savings_goal_service import (
    get_savings_goals,
    add_savings_goal,
    update_savings_goal,
    delete_savings_goal,
    get_savings_progress
)
