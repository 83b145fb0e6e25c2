"""Static curriculum data and the generators that expand it into seedable content.

Nothing in this module touches the database. ``build_program_content()``
returns plain dicts which ``seeding.ensure_content_seeded()`` upserts.
"""
import re

TOTAL_WEEKS = 12
DAYS_PER_WEEK = 7
SKILL_CHECK_XP = 5
CHECKPOINT_PASS_PERCENT = 70
CHECKPOINT_XP = 15
CHECKPOINT_MAX_QUESTIONS = 8

MANAGER_LINE_PREFIX = "What you'd tell your manager:"


class ContentCheckError(RuntimeError):
    """Raised when generated content fails the lint pass."""

    def __init__(self, issues):
        self.issues = issues
        summary = " | ".join(f"Day {i['day']}: {' '.join(i['issues'])}" for i in issues)
        super().__init__(f"Content check failed. {summary}")


class Scenario(dict):
    """Template values for one day; unknown keys render as an empty string."""

    def __missing__(self, key):
        return ""


def _fill(template: str, scenario: Scenario) -> str:
    return template.format_map(scenario)


# ── Weekly plans (12 weeks × 7 days) ──────────────────────────────────────────

WEEK_PLANS = [
    {
        "week": 1,
        "day_titles": [
            "Good questions vs bad questions",
            "Metrics that drive action",
            "Correlation vs causation",
            "Read charts without lying",
            "Define a clear decision",
            "Choose a baseline",
            "Summarize for a manager",
        ],
        "micro_goals": [
            "Write a question that leads to a clear next step.",
            "Choose a metric that changes behavior, not just attention.",
            "Avoid claiming cause when you only see a pattern.",
            "Spot misleading chart choices and fix them.",
            "Tie analysis to one business decision.",
            "Compare results to a fair baseline.",
            "Summarize insights in one clear message.",
        ],
        "scenarios": [
            {"product": "subscription app", "metric": "trial activation rate",
             "vanity_metric": "app installs", "segment": "new users"},
            {"product": "online store", "metric": "checkout conversion",
             "vanity_metric": "website visits", "segment": "mobile shoppers"},
            {"product": "delivery service", "metric": "on-time rate",
             "vanity_metric": "order volume", "segment": "evening orders"},
            {"product": "learning platform", "metric": "lesson completion rate",
             "vanity_metric": "sign-ups", "segment": "free users"},
            {"product": "support team", "metric": "first response time",
             "vanity_metric": "tickets created", "segment": "enterprise accounts"},
            {"product": "marketing campaign", "metric": "lead-to-demo rate",
             "vanity_metric": "ad impressions", "segment": "paid search"},
            {"product": "B2B SaaS", "metric": "weekly active accounts",
             "vanity_metric": "email opens", "segment": "new trials"},
        ],
    },
    {
        "week": 2,
        "day_titles": [
            "Clean messy rows",
            "Fix text issues",
            "Fix dates",
            "IF basics",
            "COUNTIF and SUMIF",
            "Remove duplicates safely",
            "Cleanup checklist",
        ],
        "micro_goals": [
            "Find and remove obvious data issues before analysis.",
            "Standardize text so categories match.",
            "Convert text dates into usable dates.",
            "Use IF to label rows for analysis.",
            "Use COUNTIF/SUMIF to summarize quickly.",
            "Remove duplicates without losing valid rows.",
            "Build a repeatable cleanup flow.",
        ],
        "scenarios": [
            {"file": "orders.csv", "column": "Customer Name", "date_column": "Order Date", "metric": "Revenue"},
            {"file": "leads.xlsx", "column": "Company", "date_column": "Lead Date", "metric": "Qualified Leads"},
            {"file": "tickets.xlsx", "column": "Category", "date_column": "Created Date", "metric": "Resolved Tickets"},
            {"file": "subscriptions.csv", "column": "Plan", "date_column": "Start Date", "metric": "Active Plans"},
            {"file": "returns.csv", "column": "Reason", "date_column": "Return Date", "metric": "Return Rate"},
            {"file": "campaigns.csv", "column": "Channel", "date_column": "Send Date", "metric": "Clicks"},
            {"file": "inventory.csv", "column": "SKU", "date_column": "Restock Date", "metric": "Units"},
        ],
    },
    {
        "week": 3,
        "day_titles": [
            "Pivot tables: first build",
            "Sort and filter",
            "Pivot chart",
            "Slicers and filters",
            "Simple KPI dashboard",
            "Highlight key changes",
            "Tell the story",
        ],
        "micro_goals": [
            "Create a pivot table that answers a basic question.",
            "Use sorting and filters to surface top drivers.",
            "Turn a pivot into a readable chart.",
            "Add slicers to make the analysis interactive.",
            "Lay out a simple KPI dashboard.",
            "Spot a change worth calling out.",
            "Explain the insight in plain business terms.",
        ],
        "scenarios": [
            {"dataset": "sales data", "dimension": "region", "metric": "revenue"},
            {"dataset": "support tickets", "dimension": "issue type", "metric": "ticket count"},
            {"dataset": "subscriptions", "dimension": "plan", "metric": "active accounts"},
            {"dataset": "marketing data", "dimension": "channel", "metric": "leads"},
            {"dataset": "product usage", "dimension": "feature", "metric": "weekly users"},
            {"dataset": "shipping data", "dimension": "carrier", "metric": "on-time deliveries"},
            {"dataset": "retail data", "dimension": "store", "metric": "units sold"},
        ],
    },
    {
        "week": 4,
        "day_titles": [
            "Project kickoff",
            "Clean the data",
            "Build core metrics",
            "Summarize with pivot",
            "Find a trend",
            "Draft the dashboard",
            "Present the insight",
        ],
        "micro_goals": [
            "Define the project question and success metric.",
            "Remove errors that block analysis.",
            "Create the core calculated fields.",
            "Summarize results with a pivot table.",
            "Spot a trend worth sharing.",
            "Lay out a clean Excel dashboard.",
            "Deliver a clear business recommendation.",
        ],
        "scenarios": [
            {"project": "retail weekly sales", "metric": "weekly revenue", "dimension": "store"},
            {"project": "subscription churn", "metric": "churn rate", "dimension": "plan"},
            {"project": "marketing leads", "metric": "lead conversion", "dimension": "channel"},
            {"project": "support workload", "metric": "tickets per agent", "dimension": "team"},
            {"project": "delivery performance", "metric": "on-time rate", "dimension": "carrier"},
            {"project": "product usage", "metric": "feature adoption", "dimension": "feature"},
            {"project": "inventory health", "metric": "stockouts", "dimension": "category"},
        ],
    },
    {
        "week": 5,
        "day_titles": [
            "Select the right columns",
            "Filter with WHERE",
            "AND / OR logic",
            "IN, BETWEEN, LIKE",
            "Order and limit",
            "Handle NULLs",
            "Basic report query",
        ],
        "micro_goals": [
            "Write a basic SELECT statement for a business question.",
            "Filter rows to the right time and segment.",
            "Combine filters correctly.",
            "Use IN/BETWEEN/LIKE for common filters.",
            "Sort results for quick review.",
            "Handle missing data safely.",
            "Build a clean query for a simple report.",
        ],
        "scenarios": [
            {"table": "orders", "metric": "revenue", "segment": "paid customers"},
            {"table": "tickets", "metric": "tickets", "segment": "priority = high"},
            {"table": "subscriptions", "metric": "active accounts", "segment": "plan = pro"},
            {"table": "sessions", "metric": "sessions", "segment": "country = US"},
            {"table": "leads", "metric": "leads", "segment": "channel = email"},
            {"table": "shipments", "metric": "deliveries", "segment": "carrier = FastShip"},
            {"table": "users", "metric": "sign-ups", "segment": "source = referral"},
        ],
    },
    {
        "week": 6,
        "day_titles": [
            "Group by basics",
            "HAVING vs WHERE",
            "Join two tables",
            "Join with filters",
            "Aggregate after joins",
            "Avoid double counts",
            "SQL summary",
        ],
        "micro_goals": [
            "Summarize data with GROUP BY.",
            "Filter aggregates with HAVING.",
            "Join tables for a fuller view.",
            "Combine joins and filters safely.",
            "Aggregate metrics after joining.",
            "Prevent double counting in joins.",
            "Deliver a clear SQL summary.",
        ],
        "scenarios": [
            {"left": "orders", "right": "customers", "metric": "revenue", "dimension": "customer"},
            {"left": "tickets", "right": "agents", "metric": "tickets", "dimension": "agent"},
            {"left": "subscriptions", "right": "plans", "metric": "active accounts", "dimension": "plan"},
            {"left": "sessions", "right": "users", "metric": "sessions", "dimension": "user"},
            {"left": "shipments", "right": "carriers", "metric": "on-time rate", "dimension": "carrier"},
            {"left": "leads", "right": "campaigns", "metric": "leads", "dimension": "campaign"},
            {"left": "orders", "right": "products", "metric": "units", "dimension": "category"},
        ],
    },
    {
        "week": 7,
        "day_titles": [
            "Pick the right chart",
            "Build a KPI board",
            "Use filters",
            "Visual hierarchy",
            "Tell a clean story",
            "Highlight changes",
            "Dashboard check",
        ],
        "micro_goals": [
            "Match chart type to the question.",
            "Create clear KPI cards.",
            "Add filters for common segments.",
            "Guide attention with layout and color.",
            "Remove clutter and focus the story.",
            "Highlight the biggest movement.",
            "Review the dashboard for clarity.",
        ],
        "scenarios": [
            {"dashboard": "sales overview", "metric": "revenue", "segment": "region"},
            {"dashboard": "support health", "metric": "response time", "segment": "team"},
            {"dashboard": "marketing performance", "metric": "lead conversion", "segment": "channel"},
            {"dashboard": "product usage", "metric": "active users", "segment": "plan"},
            {"dashboard": "delivery performance", "metric": "on-time rate", "segment": "carrier"},
            {"dashboard": "finance snapshot", "metric": "gross margin", "segment": "category"},
            {"dashboard": "growth report", "metric": "new accounts", "segment": "source"},
        ],
    },
    {
        "week": 8,
        "day_titles": [
            "Define dashboard goal",
            "Prepare the dataset",
            "Model relationships",
            "Build KPI cards",
            "Build trend view",
            "Add segment filters",
            "Final dashboard review",
        ],
        "micro_goals": [
            "State the single question the dashboard answers.",
            "Clean the data before modeling.",
            "Set relationships so metrics are accurate.",
            "Create KPI cards that match the goal.",
            "Add a clear trend chart.",
            "Add filters for key segments.",
            "Validate the dashboard before sharing.",
        ],
        "scenarios": [
            {"project": "sales pipeline", "metric": "won deals", "segment": "region"},
            {"project": "subscription health", "metric": "churn rate", "segment": "plan"},
            {"project": "support load", "metric": "open tickets", "segment": "priority"},
            {"project": "marketing ROI", "metric": "qualified leads", "segment": "channel"},
            {"project": "product adoption", "metric": "feature usage", "segment": "plan"},
            {"project": "delivery SLA", "metric": "late deliveries", "segment": "carrier"},
            {"project": "inventory risk", "metric": "stockouts", "segment": "category"},
        ],
    },
    {
        "week": 9,
        "day_titles": [
            "Load a CSV",
            "Inspect columns",
            "Clean column names",
            "Handle missing data",
            "Filter rows",
            "Create new columns",
            "Export clean data",
        ],
        "micro_goals": [
            "Load data with pandas.",
            "Inspect columns and data types.",
            "Standardize column names.",
            "Handle missing values safely.",
            "Filter rows for analysis.",
            "Create a simple calculated column.",
            "Export clean data for sharing.",
        ],
        "scenarios": [
            {"file": "orders.csv", "metric": "revenue", "column": "Order Status"},
            {"file": "tickets.csv", "metric": "tickets", "column": "Priority"},
            {"file": "subscriptions.csv", "metric": "active", "column": "Plan"},
            {"file": "sessions.csv", "metric": "sessions", "column": "Country"},
            {"file": "leads.csv", "metric": "leads", "column": "Channel"},
            {"file": "shipments.csv", "metric": "deliveries", "column": "Carrier"},
            {"file": "products.csv", "metric": "units", "column": "Category"},
        ],
    },
    {
        "week": 10,
        "day_titles": [
            "Group and summarize",
            "Trend over time",
            "Segment by category",
            "Top and bottom",
            "Simple pivot",
            "Merge datasets",
            "Write a summary",
        ],
        "micro_goals": [
            "Summarize data with groupby.",
            "Build a simple time trend.",
            "Compare segments clearly.",
            "Find top and bottom performers.",
            "Create a pivot-style summary.",
            "Merge two datasets safely.",
            "Write a business summary from results.",
        ],
        "scenarios": [
            {"metric": "revenue", "dimension": "region"},
            {"metric": "tickets", "dimension": "issue type"},
            {"metric": "active users", "dimension": "plan"},
            {"metric": "conversion rate", "dimension": "channel"},
            {"metric": "on-time rate", "dimension": "carrier"},
            {"metric": "refunds", "dimension": "reason"},
            {"metric": "feature usage", "dimension": "feature"},
        ],
    },
    {
        "week": 11,
        "day_titles": [
            "Define a cohort",
            "Cohort comparison",
            "Retention logic",
            "A/B test logic",
            "Guardrail metrics",
            "Sanity checks",
            "Recommendation",
        ],
        "micro_goals": [
            "Group users by a shared start date.",
            "Compare cohorts fairly.",
            "Interpret retention without heavy math.",
            "Understand basic A/B test logic.",
            "Use guardrail metrics to avoid harm.",
            "Validate results before sharing.",
            "Recommend a next step based on evidence.",
        ],
        "scenarios": [
            {"product": "subscription app", "metric": "week 2 retention"},
            {"product": "learning app", "metric": "lesson completion"},
            {"product": "marketplace", "metric": "repeat buyers"},
            {"product": "support tool", "metric": "ticket resolution"},
            {"product": "delivery app", "metric": "on-time rate"},
            {"product": "ecommerce site", "metric": "checkout conversion"},
            {"product": "B2B SaaS", "metric": "active accounts"},
        ],
    },
    {
        "week": 12,
        "day_titles": [
            "Clarify the case",
            "Pick the right metric",
            "Clean and analyze",
            "Explain the chart",
            "Executive summary",
            "Interview drills",
            "Final review",
        ],
        "micro_goals": [
            "Ask clarifying questions before you analyze.",
            "Choose the metric that matches the goal.",
            "Clean data and answer the prompt.",
            "Explain a chart in plain language.",
            "Write a short executive summary.",
            "Practice common interview prompts.",
            "Review your full analysis flow.",
        ],
        "scenarios": [
            {"case": "subscription churn", "metric": "churn rate"},
            {"case": "sales decline", "metric": "weekly revenue"},
            {"case": "support backlog", "metric": "open tickets"},
            {"case": "marketing ROI", "metric": "qualified leads"},
            {"case": "product adoption", "metric": "feature usage"},
            {"case": "delivery delays", "metric": "late deliveries"},
            {"case": "inventory risk", "metric": "stockouts"},
        ],
    },
]

# Weeks 1 and 2 are written for complete beginners, so their goals read plainer.
BEGINNER_MICRO_GOALS = {
    0: [
        "Turn a vague question into one clear next step.",
        "Pick a number that guides action, not just attention.",
        "Tell the difference between a pattern and a cause.",
        "Spot chart choices that exaggerate a change.",
        "Connect a question to a single decision.",
        "Compare results to a fair starting point.",
        "Sum up the story in one short update.",
    ],
    1: [
        "Clean a spreadsheet list so it is ready to use.",
        "Make names and labels match exactly.",
        "Standardize dates so they sort correctly.",
        "Use IF to label rows with a simple rule.",
        "Use COUNTIF and SUMIF to total with a rule.",
        "Remove duplicates without losing real records.",
        "Use a simple cleanup checklist before sharing.",
    ],
}


# ── Lesson question templates ─────────────────────────────────────────────────
# (kind, prompt, options, correct_index, feedback_correct, feedback_incorrect)

MCQ = "multiple_choice"
FIX = "fix_the_mistake"

WEEK_QUESTIONS = [
    [
        (MCQ, "Which question is most actionable for the {product}?",
         ["Do users like the product?",
          "Which step causes the biggest drop in {metric}?",
          "How many {vanity_metric} did we get?",
          "Is the market competitive?"],
         1, "Correct. It points to a specific action.",
         "Not quite. Choose the option tied to a clear action."),
        (FIX, 'Fix the mistake: "We are winning because {vanity_metric} went up."',
         ["Check whether {metric} improved too.",
          "Report installs only and skip other metrics.",
          "Ignore the drop in retention.",
          "Change the chart colors."],
         0, "Correct. Tie the story to a meaningful metric.",
         "Not quite. Validate impact on the real metric."),
        (MCQ, "After a new banner, {metric} rose. What is the safest statement?",
         ["The banner caused the lift.",
          "The lift happened, but we need more evidence before claiming cause.",
          "Metrics only move for one reason.",
          "The change is too small to matter."],
         1, "Correct. Correlation is not proof of cause.",
         "Not quite. Avoid claiming cause without evidence."),
        (FIX, "Fix the mistake: A chart starts at 90 and makes a small change look huge.",
         ["Use a full axis or call out the scale clearly.",
          "Remove the axis labels.",
          "Only show the last day.",
          "Replace the chart with a table of raw data."],
         0, "Correct. Keep the scale honest.",
         "Not quite. Fix the scale so it is not misleading."),
    ],
    [
        (MCQ, "You open {file}. What should you do first?",
         ["Build a chart immediately.",
          "Check for missing rows, duplicates, and column types.",
          "Hide columns you do not like.",
          "Send the file to your manager."],
         1, "Correct. Clean structure first.",
         "Not quite. Start with basic cleanup checks."),
        (FIX, "Fix the mistake: {column} has extra spaces, and counts look wrong.",
         ["Use TRIM on {column}, then count.",
          "Sort the column A to Z only.",
          "Change the font size.",
          "Hide the rows with spaces."],
         0, "Correct. Trim spaces before counting.",
         "Not quite. Remove extra spaces first."),
        (MCQ, "Which Excel function fits: \"Sum {metric} where Status = 'Paid'\"?",
         ["SUMIF", "COUNTIF", "IFERROR", "VLOOKUP"],
         0, "Correct. SUMIF matches a condition.",
         "Not quite. Use SUMIF for conditional sums."),
        (FIX, "{date_column} is stored as text and sorting is wrong. What is the fix?",
         ["Convert text to real dates (Text to Columns or DATEVALUE).",
          "Sort A to Z again.",
          "Change the cell color.",
          "Move the column to the end."],
         0, "Correct. Convert to a real date.",
         "Not quite. Fix the date type first."),
    ],
    [
        (MCQ, "You need {metric} by {dimension}. What should you use?",
         ["Pivot table", "Merge cells", "Spell check", "Freeze panes"],
         0, "Correct. Pivot tables summarize fast.",
         "Not quite. Use a pivot table for summaries."),
        (FIX, "Fix the mistake: Your pivot shows Count but you need Sum.",
         ["Change the value field summary to Sum.",
          "Sort the pivot A to Z.",
          "Add a slicer only.",
          "Convert the sheet to PDF."],
         0, "Correct. Adjust the value field settings.",
         "Not quite. Switch Count to Sum."),
        (MCQ, "Which step quickly finds the top {dimension} for {metric}?",
         ["Sort descending by the metric.",
          "Hide every other row.",
          "Use a random filter.",
          "Alphabetize by name."],
         0, "Correct. Sort by the metric.",
         "Not quite. Sort descending by the metric."),
        (FIX, "Fix the mistake: A chart has 40 categories and is unreadable.",
         ["Filter to top categories and group the rest as Other.",
          "Make the chart wider.",
          "Use brighter colors only.",
          "Remove labels entirely."],
         0, "Correct. Reduce clutter with a top list.",
         "Not quite. Reduce categories to improve clarity."),
    ],
    [
        (MCQ, "Project: {project}. What is the best first step?",
         ["Define the business question and success metric.",
          "Pick colors for the dashboard.",
          "Write a long report.",
          "Share raw data immediately."],
         0, "Correct. Start with the question and metric.",
         "Not quite. Define the question first."),
        (FIX, "Fix the mistake: You calculate a metric before removing duplicate rows.",
         ["Remove duplicates, then recalculate.",
          "Ignore duplicates for speed.",
          "Sort the data only.",
          "Change the metric definition."],
         0, "Correct. Clean before calculating.",
         "Not quite. Clean duplicates first."),
        (MCQ, "Which pivot layout best summarizes {metric} by {dimension}?",
         ["{dimension} in rows, {metric} as values.",
          "{metric} in rows, {dimension} as values.",
          "Keep all fields in one column.",
          "Do not use a pivot."],
         0, "Correct. Dimension in rows, metric in values.",
         "Not quite. Use dimension rows and metric values."),
        (FIX, "Fix the mistake: The chart shows totals but hides the trend.",
         ["Use a line chart over time for the trend.",
          "Switch to a 3D pie chart.",
          "Remove the time field.",
          "Sort alphabetically."],
         0, "Correct. Show the trend over time.",
         "Not quite. Use a time trend chart."),
    ],
    [
        (MCQ, "Which query selects {metric} from {table}?",
         ["SELECT {metric} FROM {table};",
          "GET {metric} IN {table};",
          "PICK {metric} OF {table};",
          "SHOW {metric} WITH {table};"],
         0, "Correct. Use SELECT ... FROM.",
         "Not quite. Use SELECT ... FROM."),
        (FIX, "Fix the mistake: The query pulls all rows, but you only need {segment}.",
         ["Add a WHERE filter for {segment}.",
          "Remove the FROM clause.",
          "Add a GROUP BY without a filter.",
          "Order by a random column."],
         0, "Correct. Filter with WHERE.",
         "Not quite. Add a WHERE filter."),
        (MCQ, "You need rows that match two conditions. What do you use?",
         ["AND", "OR", "LIKE", "LIMIT"],
         0, "Correct. AND combines conditions.",
         "Not quite. Use AND for both conditions."),
        (FIX, "Fix the mistake: The query should match emails ending with .edu.",
         ["Use WHERE email LIKE '%.edu'.",
          "Use WHERE email IN '.edu'.",
          "Use WHERE email BETWEEN '.e' AND '.u'.",
          "Use WHERE email = '*.edu'."],
         0, "Correct. LIKE handles patterns.",
         "Not quite. Use LIKE with a wildcard."),
    ],
    [
        (MCQ, "You need {metric} by {dimension}. Which clause is required?",
         ["GROUP BY", "ORDER BY", "LIMIT", "OFFSET"],
         0, "Correct. GROUP BY creates the summary.",
         "Not quite. Use GROUP BY."),
        (FIX, "Fix the mistake: You filter SUM(revenue) using WHERE instead of HAVING.",
         ["Move the aggregate filter to HAVING.",
          "Remove GROUP BY.",
          "Use DISTINCT instead of SUM.",
          "Filter after exporting to Excel."],
         0, "Correct. HAVING filters aggregates.",
         "Not quite. Use HAVING for aggregates."),
        (MCQ, "You want all {left} even if there is no match in {right}. Which join?",
         ["LEFT JOIN", "INNER JOIN", "RIGHT JOIN", "FULL JOIN"],
         0, "Correct. LEFT JOIN keeps all left rows.",
         "Not quite. Use LEFT JOIN."),
        (FIX, "Fix the mistake: Revenue doubled after a join because each order matches multiple rows.",
         ["Aggregate the detail table before joining.",
          "Add more columns to SELECT.",
          "Remove the join condition.",
          "Order by revenue."],
         0, "Correct. Aggregate before joining to avoid double counts.",
         "Not quite. Aggregate before joining."),
    ],
    [
        (MCQ, "Which chart best shows {metric} over time?",
         ["Line chart", "Pie chart", "Scatter plot", "Gauge only"],
         0, "Correct. Line charts show trends.",
         "Not quite. Use a line chart for trends."),
        (FIX, "Fix the mistake: The {dashboard} dashboard has 18 charts and no focus.",
         ["Keep a few KPIs and the main trend, remove extras.",
          "Add more colors to all charts.",
          "Use 3D charts for everything.",
          "Hide all labels."],
         0, "Correct. Reduce clutter and focus on the goal.",
         "Not quite. Keep only key visuals."),
        (MCQ, "A KPI should be defined as:",
         ["A metric tied to a business goal.",
          "Any number that looks good.",
          "A chart with many colors.",
          "A table with all rows."],
         0, "Correct. KPIs track goals.",
         "Not quite. KPIs must tie to a goal."),
        (FIX, "Fix the mistake: There is no filter for {segment}, so users cannot drill in.",
         ["Add a {segment} filter or slicer.",
          "Remove the metric.",
          "Hide the chart title.",
          "Switch to a table only."],
         0, "Correct. Add the filter for exploration.",
         "Not quite. Add the missing filter."),
    ],
    [
        (MCQ, "For the {project} dashboard, what should be defined first?",
         ["The single business question the dashboard answers.",
          "All possible charts.",
          "The final colors.",
          "The largest font size."],
         0, "Correct. Start with the goal.",
         "Not quite. Define the dashboard goal first."),
        (FIX, "Fix the mistake: The dataset still has duplicates and missing values.",
         ["Clean the data before building visuals.",
          "Build the dashboard anyway.",
          "Hide the bad rows with a filter.",
          "Replace all missing values with zero without review."],
         0, "Correct. Clean the data first.",
         "Not quite. Clean before visualizing."),
        (MCQ, "What should KPI cards show for {project}?",
         ["The headline metrics like {metric}.",
          "Every column in the dataset.",
          "Only chart titles.",
          "A random sample of rows."],
         0, "Correct. KPI cards show the headline metrics.",
         "Not quite. Use headline metrics only."),
        (FIX, "Fix the mistake: The trend chart uses a different date range than the KPIs.",
         ["Align the date ranges across all visuals.",
          "Remove the KPIs.",
          "Change the chart type.",
          "Only show one month."],
         0, "Correct. Keep date ranges consistent.",
         "Not quite. Align the date ranges."),
    ],
    [
        (MCQ, "Which pandas function loads a CSV file?",
         ["pd.read_csv()", "pd.open()", "pd.load()", "pd.select()"],
         0, "Correct. read_csv loads a CSV.",
         "Not quite. Use pd.read_csv()."),
        (FIX, "Fix the mistake: Column names have spaces and mixed cases.",
         ["Use df.columns = df.columns.str.strip().str.lower()",
          "Rename one column only.",
          "Sort the dataframe.",
          "Drop the column names."],
         0, "Correct. Standardize column names.",
         "Not quite. Clean the column names."),
        (MCQ, 'How do you filter rows where {column} equals "High"?',
         ['df[df["{column}"] == "High"]',
          'df.filter("{column} = High")',
          'df.where("{column}" = "High")',
          'df.only("{column}", "High")'],
         0, "Correct. Use a boolean mask.",
         "Not quite. Use df[condition]."),
        (FIX, "Fix the mistake: You need a new column for revenue after discount.",
         ['Use df["net_revenue"] = df["revenue"] - df["discount"].',
          "Use df.net_revenue() with no inputs.",
          "Delete the discount column.",
          "Change the column order."],
         0, "Correct. Create the column with a simple calculation.",
         "Not quite. Create the new column directly."),
    ],
    [
        (MCQ, "Which pandas pattern summarizes {metric} by {dimension}?",
         ['df.groupby("{dimension}")["{metric}"].sum()',
          'df.sort("{metric}")',
          'df.drop("{dimension}")',
          'df.rename("{metric}")'],
         0, "Correct. groupby creates the summary.",
         "Not quite. Use groupby with a summary."),
        (FIX, "Fix the mistake: You created a trend but forgot to sort by date.",
         ["Sort by date before plotting or summarizing.",
          "Sort by a random column.",
          "Hide the date column.",
          "Use only the latest day."],
         0, "Correct. Sort by date first.",
         "Not quite. Sort by date."),
        (MCQ, "You need the top 5 {dimension} by {metric}. What is the last step?",
         ["Sort descending and take head(5).",
          "Sort ascending and take tail(5).",
          "Drop duplicates.",
          "Fill missing values."],
         0, "Correct. Sort descending then head(5).",
         "Not quite. Sort descending and take top 5."),
        (FIX, "Fix the mistake: You merged two tables using the wrong key.",
         ["Merge on the shared unique ID column.",
          "Merge on row order.",
          "Merge on a column with duplicates only.",
          "Skip the merge and paste manually."],
         0, "Correct. Use the correct unique key.",
         "Not quite. Merge on the correct key."),
    ],
    [
        (MCQ, "A cohort is best defined by:",
         ["A shared start event, like signup month.",
          "A random sample of users.",
          "The largest segment only.",
          "Anyone active today."],
         0, "Correct. Use a shared start event.",
         "Not quite. Cohorts are based on a start event."),
        (FIX, "Fix the mistake: You compare cohorts using different time windows.",
         ["Use the same time window for each cohort.",
          "Only show the biggest cohort.",
          "Remove the time columns.",
          "Use different metrics for each cohort."],
         0, "Correct. Compare like with like.",
         "Not quite. Use the same time window."),
        (MCQ, "In an A/B test, what must be true before calling a winner?",
         ["Both groups were run at the same time with the same rules.",
          "One group was much larger and ran longer.",
          "Only clicks improved.",
          "You prefer one design."],
         0, "Correct. Keep the test fair and consistent.",
         "Not quite. Both groups must be comparable."),
        (FIX, "Fix the mistake: {metric} improved, but customer complaints spiked.",
         ["Check a guardrail metric before recommending rollout.",
          "Ignore complaints because the main metric improved.",
          "Ship the change immediately.",
          "Stop tracking the guardrail metric."],
         0, "Correct. Guardrails prevent harm.",
         "Not quite. Validate guardrails first."),
    ],
    [
        (MCQ, "In a case about {case}, what should you ask first?",
         ["What business decision will this analysis support?",
          "What is your favorite chart type?",
          "Can I skip data cleaning?",
          "Should I code everything?"],
         0, "Correct. Start with the decision.",
         "Not quite. Clarify the decision first."),
        (FIX, "Fix the mistake: Your insight is too technical for a business audience.",
         ["State the impact in business terms and the recommended action.",
          "Add more formulas.",
          "Show every row of data.",
          "Use jargon to sound advanced."],
         0, "Correct. Keep it business-focused.",
         "Not quite. Use business language and action."),
        (MCQ, "Which structure is best for an interview answer?",
         ["Context, insight, action.",
          "Tool list, code, appendix.",
          "Random facts.",
          "Only the chart title."],
         0, "Correct. Keep the story clear.",
         "Not quite. Use context, insight, action."),
        (FIX, "Fix the mistake: You jump to a conclusion before checking data quality.",
         ["Verify data quality before finalizing the conclusion.",
          "Skip validation to save time.",
          "Only check one row.",
          "Use a different chart."],
         0, "Correct. Validate before concluding.",
         "Not quite. Check data quality first."),
    ],
]

# The closing "manager" question of each week, keyed by its focus label.
MANAGER_FOCUS = [
    "data thinking", "Excel cleanup", "Excel analysis", "Excel project",
    "SQL basics", "SQL aggregation", "BI basics", "BI project",
    "Python basics", "Python analysis", "advanced analysis", "job readiness",
]


def manager_question(scenario: Scenario, focus: str) -> dict:
    metric = scenario.get("metric") or "the key metric"
    return {
        "type": MCQ,
        "prompt": f"What would you tell your manager? ({focus})",
        "options": [
            f"I found a clear change in {metric} and recommend a specific next step.",
            "The data is interesting, but I do not know what to do next.",
            "Everything looks fine, so we should stop tracking this.",
            "The numbers moved, but I did not check what action to take.",
        ],
        "correct_index": 0,
        "feedback_correct": "Correct. Lead with the insight and the action.",
        "feedback_incorrect": "Not quite. Share the insight and a clear next step.",
    }


def build_questions(week_index: int, scenario: Scenario) -> list:
    if not 0 <= week_index < len(WEEK_QUESTIONS):
        return []
    questions = [
        {
            "type": kind,
            "prompt": _fill(prompt, scenario),
            "options": [_fill(option, scenario) for option in options],
            "correct_index": correct,
            "feedback_correct": good,
            "feedback_incorrect": bad,
        }
        for kind, prompt, options, correct, good, bad in WEEK_QUESTIONS[week_index]
    ]
    questions.append(manager_question(scenario, MANAGER_FOCUS[week_index]))
    return questions


_FEEDBACK_PREFIX = re.compile(r"^(Correct\.?|Not quite\.?)\s*", re.IGNORECASE)


def to_explanation(feedback: str) -> str:
    return _FEEDBACK_PREFIX.sub("", feedback).strip()


def build_question_steps(questions: list) -> list:
    return [
        {
            "type": "fix" if q["type"] == FIX else "mcq",
            "prompt": q["prompt"],
            "choices": q["options"],
            "correct_index": q["correct_index"],
            "explanation": to_explanation(q["feedback_correct"] or q["feedback_incorrect"]),
        }
        for q in questions
    ]


# ── Visuals ───────────────────────────────────────────────────────────────────

def build_table_visual(day_number: int, scenario: Scenario) -> dict:
    header_left = next(
        (scenario.get(key) for key in ("dimension", "segment", "channel", "plan", "category", "feature")
         if scenario.get(key)),
        "Group",
    )
    header_right = scenario.get("metric") or "Result"
    base = 40 + day_number * 2
    return {
        "type": "table",
        "headers": [header_left, header_right],
        "rows": [
            [f"{header_left} A", str(base + 12)],
            [f"{header_left} B", str(base + 4)],
            [f"{header_left} C", str(base + 18)],
        ],
        "highlights": [{"r": 2, "c": 1, "label": "highest"}],
        "note": "Example snapshot",
    }


def build_visual_step(day_number: int, scenario: Scenario) -> dict:
    return {"type": "visual", "title": "Example snapshot", "visual": build_table_visual(day_number, scenario)}


# ── Recaps ────────────────────────────────────────────────────────────────────

RECAP_BULLETS_BY_WEEK = [
    ["Start with one clear question.", "Tie the question to a decision.", "Share one next step."],
    ["Clean labels before counting.", "Standardize dates and text.", "Keep a clean copy to reuse."],
    ["Summarize with a pivot.", "Sort to see the top drivers.", "Keep visuals simple and clear."],
    ["Define the goal first.", "Build the core calculation.", "Share one clear takeaway."],
    ["Select only needed columns.", "Filter to the right segment.", "Order results for review."],
    ["Group before you summarize.", "Join on the right keys.", "Avoid double counting."],
    ["Pick the right chart.", "Use clean hierarchy.", "Highlight one key change."],
    ["Start with the dashboard goal.", "Model data cleanly.", "Validate before sharing."],
    ["Load files correctly.", "Clean columns first.", "Handle missing values."],
    ["Group to compare segments.", "Check trends over time.", "Summarize with one clear line."],
    ["Compare like with like.", "Watch guardrail signals.", "Recommend the next step."],
    ["Clarify the decision.", "Explain in plain language.", "Practice the story."],
]

MANAGER_LINES = [
    lambda s: f"{s['metric']} moved for {s['segment'] or 'one group'}, so we should check the step where users drop.",
    lambda s: f"The sheet is clean, so {s['metric']} counts are now reliable.",
    lambda s: f"The pivot shows {s['metric']} is highest for {s['dimension'] or 'one group'}.",
    lambda s: (f"The project highlights {s['metric']} by {s['dimension'] or 'segment'}; "
               "next is to act on the top driver."),
    lambda s: f"The query isolates {s['segment'] or 'the target segment'} and shows {s['metric']} clearly.",
    lambda s: (f"After joining {s['left']} and {s['right']}, {s['metric']} stands out "
               f"by {s['dimension'] or 'group'}."),
    lambda s: f"The dashboard makes {s['metric']} by {s['segment'] or 'segment'} easy to track.",
    lambda s: f"The {s['project']} view keeps {s['metric']} front and center with clean filters.",
    lambda s: f"The CSV is clean, so {s['metric']} by {s['column'] or 'category'} is trustworthy.",
    lambda s: (f"Grouping shows {s['metric']} differs by {s['dimension'] or 'segment'}; "
               "we should focus on the top group."),
    lambda s: f"Cohort comparisons show {s['metric']} shifted; we should test the next change carefully.",
    lambda s: (f"For {s['case']}, the key driver is {s['metric']}; "
               "my recommendation is a focused follow-up."),
]


def manager_line(week_index: int, scenario: Scenario) -> str:
    if 0 <= week_index < len(MANAGER_LINES):
        return f"{MANAGER_LINE_PREFIX} {MANAGER_LINES[week_index](scenario)}"
    return f"{MANAGER_LINE_PREFIX} The key change is clear, and we have a next step."


def build_recap(week_index: int, scenario: Scenario):
    """Return (bullets, real_world_line, recap_step) for one lesson."""
    bullets = RECAP_BULLETS_BY_WEEK[min(week_index, len(RECAP_BULLETS_BY_WEEK) - 1)]
    line = manager_line(week_index, scenario)
    body = "\n".join(f"- {bullet}" for bullet in bullets) + "\n" + line
    return bullets, line, {"type": "learn", "title": "Recap", "body": body}


# ── Lesson scaffolds ──────────────────────────────────────────────────────────
# Weeks 1-2: (intuition body, [(learn title, learn body), ...]) per day.

BEGINNER_SCAFFOLDS = {
    0: [
        ('You are planning a road trip. "Will we have fun?" is too big. "Which stop makes the trip '
         'too long?" tells you what to change. A clear question points to one fix.',
         [("Focus on one step",
           "For a {product}, pick a single moment to inspect, like sign-up or first use. "
           "That keeps the work small and specific."),
          ("Make the decision obvious",
           "Ask a question that ends with a choice: keep the current flow, change one step, "
           "or test a new one.")]),
        ("A cafe looks busy from the street, but the owner cares about paid orders. "
         "The right number tells you if the cafe is healthy.",
         [("What a metric means",
           "A metric is a number that shows health. For a {product}, {metric} shows if visitors move forward."),
          ("Vanity vs action",
           "Big counts like {vanity_metric} can rise while {metric} stays flat. Choose the number "
           "that would change what the team does tomorrow.")]),
        ("Umbrellas and rain show up together. The umbrellas did not cause the rain. "
         "They just arrive at the same time.",
         [("Pattern vs cause",
           "When two things move together, you have a pattern. That pattern is called correlation."),
          ("Prove the cause",
           "If {metric} changed after a new idea, say it might be related unless you can point "
           "to a test you controlled.")]),
        ("Zoom in on a small scratch and it looks huge. The view you choose changes the story.",
         [("Scale matters",
           "Charts can exaggerate changes in {metric} by cropping the scale or skipping labels."),
          ("Tell the honest story",
           "Use clear labels and a fair range so a small change looks small and a big change looks big.")]),
        ('At dinner, "what should we eat?" is vague. "Do we want pasta or salad?" leads to a choice.',
         [("Start with the decision",
           "For a {product}, decide what you might change first, like a message, a flow step, or a feature."),
          ("Write the question",
           "Phrase the question so it directly informs that decision. If you cannot name the "
           "decision, rewrite the question.")]),
        ("Before you paint a wall, you look at the old color. That starting point helps you judge the change.",
         [("Define a baseline",
           "A baseline is the starting point you compare against, like {metric} last week."),
          ("Make it fair",
           "Compare similar periods, like weekdays to weekdays, so your comparison is honest.")]),
        ("You text a friend: what happened, why it matters, what next. Short and clear.",
         [("One-sentence update",
           'Start with the outcome in plain words. Example: "{metric} changed for {segment}."'),
          ("Add the action",
           "End with what you recommend the team do next. Keep it one step.")]),
    ],
    1: [
        ("Your shopping list has crossed-out items, duplicates, and messy notes. "
         "You clean it before going to the store.",
         [("What data is",
           "Data is just the rows in a spreadsheet. In {file}, each row is one record."),
          ("Cleaning basics",
           "Start by checking {column} for blanks or typos so your totals are reliable.")]),
        ('The same person is saved as "Sam", "SAM", and "Sammy". It looks like three people.',
         [("Make text match",
           "Standardize {column} so labels match exactly. That keeps counts accurate."),
          ("Use simple fixes",
           "Trim spaces, fix casing, and replace common variants before you summarize.")]),
        ("Three friends write the same date in three different ways. You cannot sort them.",
         [("Pick one format",
           "Choose one date format for {date_column}, like YYYY-MM-DD."),
          ("Convert text to dates",
           "In Excel, convert text dates so they sort and filter correctly.")]),
        ("A bouncer checks IDs: if age is 21+, allow entry. If not, deny.",
         [("IF is a rule",
           "IF lets you label rows using a simple rule: if the condition is true, use one label, "
           "otherwise use another."),
          ("Concrete example",
           'Example: if {metric} is over target, label it "ok"; otherwise "needs work".')]),
        ("You count red socks, then add up only the red socks' prices.",
         [("COUNTIF counts with a rule",
           'COUNTIF counts rows that match a condition, like {metric} = "high".'),
          ("SUMIF totals with a rule",
           "SUMIF adds values for rows that match the condition, like summing {metric} for one category.")]),
        ("A receipt is scanned twice, doubling the total. You need to keep just one.",
         [("Why duplicates hurt",
           "Duplicates make totals like {metric} too high, so decisions are wrong."),
          ("Remove safely",
           "Check the key column in {file} (like an ID) so you remove true duplicates only.")]),
        ("A pilot runs a checklist before takeoff. It prevents easy mistakes.",
         [("Quick checklist",
           "Scan {file} for blanks, weird dates, and mismatched labels before you continue."),
          ("Save a clean copy",
           "Keep a cleaned version so you can always go back.")]),
    ],
}

DEFAULT_INTUITION_BY_WEEK = [
    "You are trying to pick the best route home. You compare a few options and choose the one that saves time.",
    "You sort a messy drawer into neat groups before you decide what to keep.",
    "You separate receipts by store to see where most money goes.",
    "You plan a party by listing the steps in order before doing any work.",
    "At a cafe, you only order the items you actually want, not everything on the menu.",
    "You group similar items together to see the biggest categories fast.",
    "Your car dashboard shows speed, fuel, and warnings at a glance.",
    "You build a presentation board by choosing only the most important points.",
    "You use a tool to tidy a long list quickly, so you can work with it.",
    "You compare shelves in a pantry to see which one empties fastest.",
    "You compare two teams after giving them the same starting resources.",
    "You practice telling a short story so people understand it right away.",
]
FALLBACK_INTUITION = "You arrange items into simple groups so the important ones stand out."


def _intuition(body: str) -> dict:
    return {"type": "intuition", "title": "Picture this", "body": body}


def build_scenario_prompt(scenario: Scenario) -> str:
    metric = scenario.get("metric")
    if metric and scenario.get("dimension"):
        return f"Which {scenario['dimension']} drives {metric}?"
    if metric and scenario.get("segment"):
        return f"How does {scenario['segment']} affect {metric}?"
    if metric and scenario.get("channel"):
        return f"Which {scenario['channel']} performs best for {metric}?"
    if metric and scenario.get("table"):
        return f"What is {metric} in {scenario['table']}?"
    return "What changed, and what should we do next?"


def build_beginner_steps(week_index: int, day_index: int, scenario: Scenario) -> list:
    intuition_body, learns = BEGINNER_SCAFFOLDS[week_index][day_index]
    steps = [_intuition(intuition_body)]
    steps.extend({"type": "learn", "title": title, "body": _fill(body, scenario)} for title, body in learns)
    return steps


def build_default_steps(week_index: int, micro_goal: str, scenario: Scenario) -> list:
    if week_index < len(DEFAULT_INTUITION_BY_WEEK):
        intuition = _intuition(DEFAULT_INTUITION_BY_WEEK[week_index])
    else:
        intuition = _intuition(FALLBACK_INTUITION)
    prompt = build_scenario_prompt(scenario)
    return [
        intuition,
        {"type": "learn", "title": "What you will do", "body": micro_goal, "example": f"Example: {prompt}"},
        {"type": "learn", "title": "Why it matters", "body": f"This skill helps you answer questions like: {prompt}"},
    ]


def iter_days():
    """Yield (day_number, week_index, day_index, title, scenario) for the whole program."""
    day_number = 1
    for week_index, week in enumerate(WEEK_PLANS):
        for day_index, title in enumerate(week["day_titles"]):
            scenarios = week["scenarios"]
            yield day_number, week_index, day_index, title, Scenario(scenarios[day_index % len(scenarios)])
            day_number += 1


def build_lessons() -> list:
    lessons = []
    for day_number, week_index, day_index, title, scenario in iter_days():
        if week_index in BEGINNER_SCAFFOLDS:
            steps = build_beginner_steps(week_index, day_index, scenario)
            micro_goal = BEGINNER_MICRO_GOALS[week_index][day_index]
        else:
            micro_goal = WEEK_PLANS[week_index]["micro_goals"][day_index]
            steps = build_default_steps(week_index, micro_goal, scenario)
        steps.append(build_visual_step(day_number, scenario))
        steps.extend(build_question_steps(build_questions(week_index, scenario)))

        bullets, line, recap_step = build_recap(week_index, scenario)
        steps.append(recap_step)
        lessons.append({
            "day": day_number,
            "title": f"Day {day_number}: {title}",
            "micro_goal": micro_goal,
            "recap_bullets": bullets,
            "real_world_line": line,
            "steps": steps,
        })
    return lessons


# ── Skill checks ──────────────────────────────────────────────────────────────
# (title, prompt, type, choices, correct_index, explanation)

WEEK_SKILL_CHECKS = [
    [
        ("Pick the sharper question", "You run a {product}. Which question is easiest to act on?", "mcq",
         ["Which step causes the biggest drop in {metric}?", "Do users like the product?",
          "How many {vanity_metric} did we get?", "Is the market competitive?"],
         0, "Actionable questions point to a specific step."),
        ("Highlight the right number", "In a weekly update, which number should lead?", "mcq",
         ["{metric}", "{vanity_metric}", "Total followers", "Press mentions"],
         0, "Lead with the number tied to outcomes."),
    ],
    [
        ("First cleanup move", "In {file}, {column} has extra spaces. What is the first fix?", "fix",
         ["Trim spaces and standardize casing.", "Sort the column by length.",
          "Delete the entire column.", "Hide the column."],
         0, "Standardize labels before counting."),
        ("Pick the right formula", 'Which formula counts rows where {metric} is "High"?', "mcq",
         ["COUNTIF", "SUMIF", "AVERAGE", "IF"],
         0, "COUNTIF counts rows that match a condition."),
    ],
    [
        ("Best Excel tool", "You need {metric} by {dimension}. What is the fastest Excel tool?", "mcq",
         ["Pivot table", "Manual sorting", "Freeze panes", "Text to columns"],
         0, "Pivot tables summarize quickly."),
        ("Find the top driver", "To surface the biggest {dimension}, what should you do?", "fix",
         ["Sort the summary column descending.", "Hide the smallest values.",
          "Delete half the rows.", "Change the chart color."],
         0, "Sorting shows the top drivers."),
    ],
    [
        ("Project kickoff step", "For {project}, what comes first?", "mcq",
         ["Define the goal and success metric.", "Pick chart colors.",
          "Share a draft slide.", "Hide missing values."],
         0, "Start with the goal before building."),
        ("Share the insight", "Which update is best to share?", "mcq",
         ["One clear change and the next action.", "Every row in the sheet.",
          "A list of formulas only.", "No recommendation."],
         0, "Keep it short and actionable."),
    ],
    [
        ("Filter rows", "Which SQL clause filters rows?", "mcq",
         ["WHERE", "GROUP BY", "ORDER BY", "LIMIT"],
         0, "WHERE filters rows."),
        ("Target segment", "Which clause limits results to {segment}?", "mcq",
         ["WHERE", "SELECT", "FROM", "JOIN"],
         0, "WHERE sets the filter condition."),
    ],
    [
        ("Group the results", "To summarize {metric} by {dimension}, which clause is required?", "mcq",
         ["GROUP BY", "ORDER BY", "WHERE", "LIMIT"],
         0, "GROUP BY defines the aggregation group."),
        ("Filter after grouping", "Which clause filters aggregated results?", "mcq",
         ["HAVING", "WHERE", "JOIN", "SELECT"],
         0, "HAVING filters after aggregation."),
    ],
    [
        ("Pick the chart", "To compare {metric} across {segment}, what chart fits best?", "mcq",
         ["Bar chart", "Pie chart", "Scatter plot", "Single KPI card"],
         0, "Bar charts compare categories clearly."),
        ("KPI card focus", "A KPI card should show:", "mcq",
         ["One headline number.", "All filters and tables.", "Raw row data.", "Every chart on the page."],
         0, "KPI cards spotlight one number."),
    ],
    [
        ("Dashboard goal", "Before building a {project} dashboard, do what?", "mcq",
         ["Write the single question it answers.", "Choose colors.", "Add every chart type.", "Export CSVs."],
         0, "The goal drives the layout."),
        ("Keep filters clean", "Filters should be added for:", "mcq",
         ["Common segments people ask about.", "Every column in the dataset.",
          "Random categories.", "Hidden fields only."],
         0, "Filters should match frequent questions."),
    ],
    [
        ("Load a CSV", "How do you load {file} in pandas?", "mcq",
         ["pd.read_csv()", "pd.load()", "pd.open()", "pd.import_csv()"],
         0, "read_csv loads a CSV file."),
        ("Clean column names", "Which step standardizes column names?", "fix",
         ["df.columns = df.columns.str.strip().str.lower()", "df.sort_values()", "df.dropna()", "df.describe()"],
         0, "Strip and lower names before analysis."),
    ],
    [
        ("Group in pandas", "Which pattern summarizes {metric} by {dimension}?", "mcq",
         ['df.groupby("{dimension}")["{metric}"].sum()', "df.sort_values()", "df.dropna()", "df.rename()"],
         0, "Use groupby with a summary."),
        ("Trend check", "What is the first step before plotting a trend?", "mcq",
         ["Sort by date.", "Drop the date column.", "Shuffle the data.", "Convert to text only."],
         0, "Sort before plotting time series."),
    ],
    [
        ("Define a cohort", "A cohort is grouped by:", "mcq",
         ["A shared start date.", "A random sample.", "Only top spenders.", "Anyone active today."],
         0, "Cohorts share a start event."),
        ("Guardrail check", "A guardrail metric exists to:", "mcq",
         ["Catch unintended harm.", "Make charts prettier.", "Replace all KPIs.", "Slow down reporting."],
         0, "Guardrails protect users and the business."),
    ],
    [
        ("Clarify the case", "In a case interview, ask first:", "mcq",
         ["What decision will this support?", "Which chart do you prefer?",
          "Can we skip cleaning?", "What is the font size?"],
         0, "Start with the decision."),
        ("Story structure", "The best structure is:", "mcq",
         ["Context, insight, action.", "Tools, code, appendix.", "Random facts.", "Only the chart title."],
         0, "Keep the story short and clear."),
    ],
]

SKILL_CHECKS_PER_DAY = 3


def make_skill_check(day_number: int, index: int, title, prompt, kind, choices, correct_index,
                     explanation, xp_reward=SKILL_CHECK_XP) -> dict:
    return {
        "id": f"day-{day_number}-skill-{index}",
        "day_number": day_number,
        "title": title,
        "prompt": prompt,
        "type": kind,
        "choices": choices,
        "answer": {"correct_index": correct_index},
        "explanation": explanation,
        "xp_reward": xp_reward,
    }


def build_skill_checks_for_day(day_number: int, week_index: int, scenario: Scenario) -> list:
    templates = WEEK_SKILL_CHECKS[week_index] if 0 <= week_index < len(WEEK_SKILL_CHECKS) else []
    checks = [
        make_skill_check(
            day_number, index, title, _fill(prompt, scenario), kind,
            [_fill(choice, scenario) for choice in choices], correct, explanation,
        )
        for index, (title, prompt, kind, choices, correct, explanation) in enumerate(templates, start=1)
    ]
    if len(checks) < SKILL_CHECKS_PER_DAY:
        metric = scenario.get("metric") or "the key result"
        checks.append(make_skill_check(
            day_number, len(checks) + 1,
            "Manager-ready line",
            f"Which update best helps your manager act on {metric}?",
            "mcq",
            ["State the change, the driver, and one next step.",
             "Share the full raw table.",
             "List only tools used.",
             "Hold the update until next month."],
            0,
            "Short, action-ready updates work best.",
        ))
    return checks


# ── Patterns ──────────────────────────────────────────────────────────────────

def build_patterns_for_day(day_number: int, week_index: int, scenario: Scenario, title: str) -> list:
    line = manager_line(week_index, scenario)
    good_bad_table = {
        "type": "table",
        "headers": ["Version", "What it says"],
        "rows": [
            ["Bad", "Overloaded and unclear."],
            ["Good", "One message with a clear next step."],
        ],
        "note": "Quick comparison",
    }
    manager_table = {
        "type": "table",
        "headers": ["Line", "Example"],
        "rows": [
            ["Context", f"{scenario.get('metric') or 'Key metric'} this week"],
            ["Impact", f"{scenario.get('segment') or 'Main segment'} moved the most"],
            ["Next step", "Review the top driver and adjust"],
        ],
    }
    return [
        {
            "id": f"day-{day_number}-pattern-1",
            "day_number": day_number,
            "title": f"Good vs bad: {title}",
            "description": "Quick example of clean storytelling.",
            "content": {
                "intro": "Use this as a template when presenting the day.",
                "sections": [
                    {"type": "visual", "title": "Example", "visual": good_bad_table},
                    {"type": "text", "title": "Why it works",
                     "body": "The good version focuses on one message and one action."},
                ],
                "takeaway": line,
            },
        },
        {
            "id": f"day-{day_number}-pattern-2",
            "day_number": day_number,
            "title": "Manager update template",
            "description": "Ready-to-use update with a simple structure.",
            "content": {
                "intro": "Keep the update short and decision-ready.",
                "sections": [
                    {"type": "visual", "title": "Template", "visual": manager_table},
                    {"type": "text", "title": "Tip", "body": "Replace each line with a single sentence."},
                ],
                "takeaway": line,
            },
        },
    ]


# ── Checkpoint banks ──────────────────────────────────────────────────────────
# (type, prompt, choices, correct_index, explanation, difficulty)

CHECKPOINT_BANKS = [
    [
        ("mcq", "Which question helps improve {product}?",
         ["Which step slows {metric}?", "Is the product popular?",
          "How many {vanity_metric} happened?", "What does the CEO think?"],
         0, "Pick a question that points to one step you can change.", "easy"),
        ("fix", 'Fix the update: "Installs went up, so we are winning."',
         ["Check if {metric} moved too before claiming success.", "Only share installs.",
          "Hide the report.", "Change the colors."],
         0, "Confirm the outcome number, not only attention metrics.", "easy"),
        ("mcq", "You saw {metric} rise after a change. What is safest?",
         ["The change caused the lift.",
          "The lift happened, but we need more proof before claiming cause.",
          "The lift is fake.", "We should stop tracking it."],
         1, "Correlation alone is not proof of cause.", "medium"),
        ("mcq", "Which baseline is most fair?",
         ["Last week or last month.", "Only the best day.", "A random day.", "No baseline."],
         0, "Compare to a normal period.", "medium"),
        ("fix", "Fix the chart: the axis starts at 90 for a small change.",
         ["Start at zero or call out the tight scale clearly.", "Remove the axis.",
          "Hide the labels.", "Use 3D bars."],
         0, "Avoid exaggerating movement.", "medium"),
        ("mcq", "A good manager update includes:",
         ["The change, the driver, and one next step.", "Only raw rows.",
          "Every chart you made.", "No action at all."],
         0, "Keep it action ready.", "hard"),
    ],
    [
        ("mcq", "In {file}, what should you check first?",
         ["Blanks, duplicates, and inconsistent labels.", "Chart colors.", "Font sizes.", "Column width."],
         0, "Clean structure comes first.", "easy"),
        ("fix", "{column} has extra spaces and mixed case. Fix it by:",
         ["Trim spaces and standardize case.", "Sorting only.", "Deleting the column.", "Hiding the rows."],
         0, "Normalize text so counts match.", "easy"),
        ("mcq", 'Which function sums {metric} only when Status = "Paid"?',
         ["SUMIF", "COUNTIF", "IF", "AVERAGE"],
         0, "SUMIF adds values that meet a rule.", "medium"),
        ("fix", "{date_column} is text and sorts wrong. Fix by:",
         ["Convert it to a real date type.", "Add a chart.", "Bold the column.", "Copy and paste values only."],
         0, "Date type controls sorting.", "medium"),
        ("mcq", "Why remove duplicates carefully?",
         ["So you do not delete real, unique records.", "So the file looks shorter.",
          "So charts auto-update.", "So filters stop working."],
         0, "Protect real rows while removing exact duplicates.", "medium"),
        ("mcq", "A safe cleanup flow ends with:",
         ["Saving a clean copy.", "Deleting the original file.", "Only sorting.", "Renaming columns randomly."],
         0, "Keep a clean version you can reuse.", "hard"),
    ],
    [
        ("mcq", "To summarize {metric} by {dimension}, use:",
         ["Pivot table", "Merge cells", "Freeze panes", "Spell check"],
         0, "Pivots group and summarize fast.", "easy"),
        ("fix", "Your pivot shows Count, but you need Sum. Fix by:",
         ["Change the value field to Sum.", "Sort descending.", "Hide blanks.", "Add a filter only."],
         0, "Adjust the value field summary.", "easy"),
        ("mcq", "Sorting helps you:",
         ["Find top drivers quickly.", "Create duplicates.", "Remove labels.", "Hide trends."],
         0, "Sort to surface the biggest contributors.", "medium"),
        ("mcq", "A pivot chart should:",
         ["Focus on one message.", "Show every tab at once.", "Use random colors.", "Hide labels."],
         0, "Keep the message clear.", "medium"),
        ("fix", "Fix the mistake: You filtered out needed categories.",
         ["Reset filters and verify all groups are included.", "Delete the pivot.",
          "Switch to a different sheet.", "Remove totals."],
         0, "Check filters before sharing.", "medium"),
        ("mcq", "A simple dashboard should include:",
         ["A few KPIs and a clear trend.", "Every chart possible.", "Only raw rows.", "No titles."],
         0, "Keep it tight and readable.", "hard"),
    ],
    [
        ("mcq", "The first step in the {project} project is:",
         ["Define the decision and success number.", "Build charts first.", "Hide the data.", "Skip cleaning."],
         0, "Start with the goal.", "easy"),
        ("fix", "Fix the mistake: You calculated metrics before cleaning.",
         ["Clean obvious errors first, then calculate.", "Add more formulas.",
          "Ignore the errors.", "Share the report now."],
         0, "Clean data before calculations.", "easy"),
        ("mcq", "Which summary best supports {metric}?",
         ["A pivot with totals by segment.", "Raw rows only.", "Hidden columns.", "A blank sheet."],
         0, "Summaries show the key totals.", "medium"),
        ("mcq", "A trend is useful when it:",
         ["Shows change over time.", "Hides changes.", "Removes labels.", "Ignores dates."],
         0, "Trends show direction.", "medium"),
        ("fix", "Fix the draft dashboard: It has no labels.",
         ["Add clear titles and axis labels.", "Add more colors only.", "Remove all charts.", "Use tiny fonts."],
         0, "Labels make charts readable.", "medium"),
        ("mcq", "A good final slide includes:",
         ["The key insight and recommended action.", "Every calculation.", "Only screenshots.", "No conclusion."],
         0, "End with action.", "hard"),
    ],
    [
        ("mcq", "To pull {metric} from {table}, start with:",
         ["SELECT", "UPDATE", "DROP", "INSERT"],
         0, "SELECT reads data.", "easy"),
        ("fix", "Fix the query: You filtered after aggregating.",
         ["Use WHERE before GROUP BY.", "Use LIMIT only.", "Remove WHERE.", "Sort first."],
         0, "WHERE filters rows before grouping.", "easy"),
        ("mcq", "Which clause filters rows?",
         ["WHERE", "GROUP BY", "ORDER BY", "JOIN"],
         0, "WHERE filters rows.", "medium"),
        ("mcq", "To match multiple values, use:",
         ["IN", "LIKE", "JOIN", "LIMIT"],
         0, "IN is for lists.", "medium"),
        ("fix", "Fix the mistake: Results are unsorted.",
         ["Add ORDER BY for the main column.", "Add JOIN.", "Delete WHERE.", "Use DISTINCT only."],
         0, "ORDER BY sorts results.", "medium"),
        ("mcq", "NULL values should be handled by:",
         ["Checking for NULL explicitly.", "Ignoring them always.", "Removing the table.", "Sorting first."],
         0, "Check NULLs to avoid surprises.", "hard"),
    ],
    [
        ("mcq", "GROUP BY is used to:",
         ["Summarize by category.", "Sort alphabetically.", "Delete rows.", "Rename columns."],
         0, "GROUP BY creates summaries.", "easy"),
        ("fix", "Fix the mistake: You used WHERE on an aggregate.",
         ["Use HAVING for aggregate filters.", "Remove GROUP BY.", "Add LIMIT.", "Sort by id."],
         0, "HAVING filters aggregated results.", "easy"),
        ("mcq", "A join should connect tables on:",
         ["Matching keys.", "Random columns.", "Row number only.", "Text length."],
         0, "Join on shared keys.", "medium"),
        ("mcq", "After a join, you should:",
         ["Check for duplicates.", "Assume counts are fine.", "Delete a column.", "Skip validation."],
         0, "Joins can duplicate rows.", "medium"),
        ("fix", "Fix the mistake: Aggregates are inflated after join.",
         ["Aggregate after the join with correct keys.", "Add more joins.", "Use SELECT *.", "Delete filters."],
         0, "Aggregate carefully after joining.", "medium"),
        ("mcq", "To filter on totals, use:",
         ["HAVING", "WHERE", "ORDER BY", "LIMIT"],
         0, "HAVING filters aggregate results.", "hard"),
    ],
    [
        ("mcq", "A chart choice should match:",
         ["The question you are answering.", "Your favorite colors.", "Font size.", "Data source only."],
         0, "Pick charts for the question.", "easy"),
        ("fix", "Fix the dashboard: It has too many KPIs.",
         ["Keep only the KPIs tied to the goal.", "Add more cards.", "Hide labels.", "Use random colors."],
         0, "Focus on the KPIs that matter.", "easy"),
        ("mcq", "Filters help because they:",
         ["Let people see segments quickly.", "Hide the trend.", "Remove data.", "Change the source."],
         0, "Filters speed up exploration.", "medium"),
        ("mcq", "Visual hierarchy means:",
         ["The most important info is easiest to see.", "Everything looks the same.",
          "All text is small.", "No titles."],
         0, "Guide attention to key info.", "medium"),
        ("fix", "Fix the mistake: The dashboard is cluttered.",
         ["Remove non-essential visuals.", "Add more charts.", "Shrink all text.", "Hide the axes."],
         0, "Remove clutter to focus.", "medium"),
        ("mcq", "Before sharing, you should:",
         ["Confirm filters and totals.", "Turn off legends.", "Delete the data model.", "Hide titles."],
         0, "Validate before sharing.", "hard"),
    ],
    [
        ("mcq", "A dashboard project starts with:",
         ["A single goal question.", "Colors and fonts.", "Chart types only.", "No data prep."],
         0, "Start with the goal.", "easy"),
        ("fix", "Fix the model: Relationships are missing.",
         ["Define relationships before building visuals.", "Add more charts.", "Hide tables.", "Use only CSVs."],
         0, "Relationships keep metrics correct.", "easy"),
        ("mcq", "KPI cards should show:",
         ["Key numbers tied to the goal.", "Every table name.", "Random stats.", "No context."],
         0, "Keep KPI cards focused.", "medium"),
        ("mcq", "A trend view should:",
         ["Show change over time clearly.", "Hide dates.", "Use only pie charts.", "Remove labels."],
         0, "Trends need time on the axis.", "medium"),
        ("fix", "Fix the mistake: Filters are missing.",
         ["Add filters for main segments.", "Delete all slicers.", "Hide legends.", "Use only one color."],
         0, "Filters make dashboards useful.", "medium"),
        ("mcq", "Final review checks:",
         ["Totals, filters, and titles.", "Only colors.", "Only fonts.", "Nothing at all."],
         0, "Check the basics before sharing.", "hard"),
    ],
    [
        ("mcq", "To load {file}, use:",
         ["read_csv", "groupby", "merge", "plot"],
         0, "read_csv loads files.", "easy"),
        ("fix", "Fix the mistake: Column names have spaces.",
         ["Standardize names (lowercase, underscores).", "Add more columns.", "Hide headers.", "Drop all columns."],
         0, "Clean names before analysis.", "easy"),
        ("mcq", "To inspect column types, use:",
         ["info()", "sum()", "merge()", "plot()"],
         0, "info() shows types and nulls.", "medium"),
        ("mcq", "Missing values should be handled by:",
         ["Filling or removing based on the goal.", "Ignoring always.", "Deleting the file.", "Sorting only."],
         0, "Handle missing values on purpose.", "medium"),
        ("fix", "Fix the mistake: You filtered after exporting.",
         ["Filter before exporting clean data.", "Export raw data only.", "Delete the filter.", "Rename the file."],
         0, "Filter before export.", "medium"),
        ("mcq", "A new column can be created by:",
         ["Combining or calculating from existing columns.", "Changing colors.", "Renaming the file.", "Sorting."],
         0, "Create derived columns with simple rules.", "hard"),
    ],
    [
        ("mcq", "groupby is used to:",
         ["Summarize by category.", "Sort columns.", "Drop rows.", "Change data types."],
         0, "groupby summarizes by group.", "easy"),
        ("fix", "Fix the mistake: You plotted before sorting by date.",
         ["Sort by date, then plot.", "Remove the date.", "Shuffle rows.", "Use only bar charts."],
         0, "Sort time series first.", "easy"),
        ("mcq", "Segmentation helps you:",
         ["Compare groups clearly.", "Hide differences.", "Skip labels.", "Remove columns."],
         0, "Segments show differences.", "medium"),
        ("mcq", "Top and bottom views help you:",
         ["Find best and worst performers.", "Remove all data.", "Ignore trends.", "Hide outliers."],
         0, "Rank to see extremes.", "medium"),
        ("fix", "Fix the mistake: You merged without checking keys.",
         ["Validate keys before merging.", "Merge on row number.", "Ignore duplicates.", "Drop both tables."],
         0, "Check keys first.", "medium"),
        ("mcq", "A good summary line includes:",
         ["Metric, change, and action.", "Only tools used.", "Every row count.", "No context."],
         0, "Keep it action-ready.", "hard"),
    ],
    [
        ("mcq", "A cohort groups users by:",
         ["The same start event.", "Random picks.", "Only top spenders.", "One location only."],
         0, "Cohorts share a start.", "easy"),
        ("fix", "Fix the mistake: You compared cohorts from different start months.",
         ["Compare cohorts with the same timeline.", "Mix all cohorts.", "Drop the date.", "Hide the chart."],
         0, "Align cohorts by time since start.", "easy"),
        ("mcq", "Retention means:",
         ["How many users return over time.", "Total downloads.", "Number of charts.", "Emails sent."],
         0, "Retention tracks repeat usage.", "medium"),
        ("mcq", "In an A/B test, you should:",
         ["Keep the groups consistent.", "Change rules mid-test.",
          "Stop tracking guardrails.", "Pick a winner on day one."],
         0, "Consistency keeps tests fair.", "medium"),
        ("fix", "Fix the mistake: You ignored a guardrail metric.",
         ["Check guardrails before deciding.", "Ignore it if the main metric is up.",
          "Delete the guardrail.", "Stop the test."],
         0, "Guardrails prevent harm.", "medium"),
        ("mcq", "A final recommendation should:",
         ["State the next step clearly.", "List every tool.", "Hide results.", "Skip the action."],
         0, "Recommendations need an action.", "hard"),
    ],
    [
        ("mcq", "A good case kickoff question is:",
         ["What decision will this support?", "What colors do you prefer?",
          "Can we skip cleaning?", "What is the font size?"],
         0, "Start with the decision.", "easy"),
        ("fix", "Fix the mistake: You jumped to charts without cleaning.",
         ["Check data quality first.", "Add more visuals.", "Hide the table.", "Ignore missing values."],
         0, "Clean before charting.", "easy"),
        ("mcq", "When explaining a chart, lead with:",
         ["The key change and why it matters.", "Every axis detail.", "Your tool choice.", "The colors used."],
         0, "Lead with insight.", "medium"),
        ("mcq", "An executive summary should be:",
         ["Short, clear, and actionable.", "Long and technical.", "Only charts.", "Only raw data."],
         0, "Keep it short and clear.", "medium"),
        ("fix", "Fix the interview answer: It is tool-only.",
         ["Add context, insight, and action.", "List more tools.", "Shorten to one word.", "Remove the outcome."],
         0, "Stories beat tool lists.", "medium"),
        ("mcq", "A strong closing line is:",
         ["I found the change, explained impact, and recommended a next step.",
          "I used many tools.", "The data was big.", "I made charts."],
         0, "End with impact and action.", "hard"),
    ],
]

FALLBACK_CHECKPOINT_BANK = [
    ("mcq", "What is the best next step?",
     ["Take one clear action.", "Wait and hope.", "Ignore the change.", "Share no update."],
     0, "Lead with an action.", "easy"),
]


def build_checkpoint_questions(week_index: int, scenario: Scenario, test_id: str) -> list:
    bank = CHECKPOINT_BANKS[week_index] if 0 <= week_index < len(CHECKPOINT_BANKS) else FALLBACK_CHECKPOINT_BANK
    return [
        {
            "id": f"{test_id}-q{index}",
            "checkpoint_test_id": test_id,
            "type": kind,
            "prompt": _fill(prompt, scenario),
            "choices": [_fill(choice, scenario) for choice in choices],
            "answer": {"correct_index": correct},
            "explanation": explanation,
            "difficulty": difficulty,
        }
        for index, (kind, prompt, choices, correct, explanation, difficulty)
        in enumerate(bank[:CHECKPOINT_MAX_QUESTIONS], start=1)
    ]


def build_checkpoint_test_for_day(day_number: int, week_index: int, scenario: Scenario, title: str) -> dict:
    test_id = f"checkpoint-day-{day_number}"
    return {
        "id": test_id,
        "day_number": day_number,
        "title": f"Checkpoint Day {day_number}: {title}",
        "pass_percent": CHECKPOINT_PASS_PERCENT,
        "xp_reward": CHECKPOINT_XP,
        "questions": build_checkpoint_questions(week_index, scenario, test_id),
    }


def build_program_content() -> dict:
    skill_checks, patterns, checkpoint_tests = [], [], []
    for day_number, week_index, _day_index, title, scenario in iter_days():
        skill_checks.extend(build_skill_checks_for_day(day_number, week_index, scenario))
        patterns.extend(build_patterns_for_day(day_number, week_index, scenario, title))
        checkpoint_tests.append(build_checkpoint_test_for_day(day_number, week_index, scenario, title))
    return {
        "lessons": build_lessons(),
        "skill_checks": skill_checks,
        "patterns": patterns,
        "checkpoint_tests": checkpoint_tests,
    }


# ── Content lint ──────────────────────────────────────────────────────────────

BANNED_PHRASES = ("analyze the data", "use insights", "optimize metrics")


def lint_program_content(content: dict) -> list:
    """Return [{"day": n, "issues": [...]}, ...] for lessons that break the house rules."""
    issues = []
    for lesson in content["lessons"]:
        lesson_issues = []
        has_table = any(
            step["type"] == "visual" and (step.get("visual") or {}).get("type") == "table"
            for step in lesson["steps"]
        )
        if not has_table:
            lesson_issues.append("Missing table visual step.")
        if MANAGER_LINE_PREFIX not in (lesson.get("real_world_line") or ""):
            lesson_issues.append("Missing manager-style sentence.")
        for step in lesson["steps"]:
            if step["type"] not in ("intuition", "learn"):
                continue
            haystack = f"{step.get('title') or ''} {step.get('body') or ''}".lower()
            if any(phrase in haystack for phrase in BANNED_PHRASES) and not (step.get("example") or "").strip():
                lesson_issues.append(f"Vague phrase without example in \"{step.get('title') or 'step'}\".")
        if lesson_issues:
            issues.append({"day": lesson["day"], "issues": lesson_issues})
    return issues


def run_content_checks() -> list:
    return lint_program_content(build_program_content())
