"""FuncStudy UI -- Gradio front end for the function-study tools.

Run:  uv run python -m ui.app
"""

import gradio as gr
from experts.funcstudy.config import SETTINGS
from experts.funcstudy.logs import configure_logging
from experts.funcstudy.tools.algebra import math_tool
from experts.funcstudy.tools.calculus import calculus_tool, OPERATIONS as CALC_OPS

EXAMPLES = [
    ["1/(x-2)", "resolve"],
    ["(x^2-4)/(x-2)", "limit"],
    ["√(x-1)", "domain"],
    ["log(x)+1/x", "resolve"],
]


def run_study(expression, operation, point=""):
    """Dispatch one request from the form to the matching tool."""
    expression = (expression or "").strip()
    point = (point or "").strip() or None
    if operation == "compute":
        return math_tool(expression, "compute", point=point)
    return calculus_tool(expression, operation, point=point)


def build_ui():
    with gr.Blocks(title="FuncStudy") as app:
        gr.Markdown("## FuncStudy\nDomain and limits of a real function of **x**.")

        with gr.Row():
            expr_tb = gr.Textbox(label="f(x)", placeholder="e.g. (x^2-1)/(x-1)", scale=4)
            op_dd = gr.Dropdown(
                choices=sorted(CALC_OPS) + ["compute"],
                value="resolve", label="Operation", scale=1,
            )
            point_tb = gr.Textbox(label="x (evaluate / compute)", scale=1)

        run_btn = gr.Button("Study", variant="primary")
        out = gr.JSON(label="Result")

        gr.Examples(EXAMPLES, inputs=[expr_tb, op_dd])

        run_btn.click(run_study, [expr_tb, op_dd, point_tb], out)
        expr_tb.submit(run_study, [expr_tb, op_dd, point_tb], out)

    return app


if __name__ == "__main__":
    configure_logging(SETTINGS.log_level)
    build_ui().launch(
        server_name=SETTINGS.ui_host,
        server_port=SETTINGS.ui_port,
        share=SETTINGS.share,
    )
