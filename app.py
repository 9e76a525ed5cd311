import logging

import gradio as gr

from webhook_variables.handlers import (
    RULE_TABLE_HEADERS,
    explore_payload_handler,
    load_payload_file,
    load_rules_file,
    resolve_handler,
    suggest_rules_handler,
)
from webhook_variables.rules import ExpressionType

logging.basicConfig(level=logging.INFO, format="%(asctime)s %(levelname)s %(name)s: %(message)s")

# --- UI Definition ---
with gr.Blocks(title="Webhook Variable Resolver") as demo:
    gr.Markdown("# Webhook Variable Resolver")
    gr.Markdown("Paste a webhook payload, configure extraction rules, and preview the resolved build variables.")

    with gr.Tab("Resolve Variables"):
        with gr.Row():
            # Left Panel: Payload
            with gr.Column(scale=1):
                gr.Markdown("### 1. Payload")
                payload_file = gr.File(label="Upload Payload", file_types=[".json", ".xml", ".txt"])
                payload_text = gr.Code(label="Payload", language="json", lines=18)
                status_msg = gr.Textbox(label="Status", interactive=False)

            # Right Panel: Rules
            with gr.Column(scale=1):
                gr.Markdown("### 2. Rules")
                rules_file = gr.File(label="Upload Rules (JSON)", file_types=[".json"])
                rules_table = gr.Dataframe(
                    headers=RULE_TABLE_HEADERS,
                    datatype=["str"] * len(RULE_TABLE_HEADERS),
                    col_count=(len(RULE_TABLE_HEADERS), "fixed"),
                    value=[["", ExpressionType.JSONPATH.value, "", "", ""]],
                    interactive=True,
                    label="Generic Variables",
                )
                gr.Markdown(f"Expression Type is one of: {', '.join(t.value for t in ExpressionType)}.")

                gr.Markdown("### 3. Text Options")
                with gr.Row():
                    text_separator = gr.Textbox(label="Text Separator (StringPart)", value=",")
                    from_chat_source = gr.Checkbox(label="Request from chat source", value=False)

                gr.Markdown("### 4. Resolve")
                resolve_btn = gr.Button("Resolve", variant="primary")
                resolve_status = gr.Textbox(label="Resolve Status", interactive=False)
                resolved_output = gr.JSON(label="Resolved Variables")

        payload_file.upload(
            fn=load_payload_file,
            inputs=[payload_file],
            outputs=[payload_text, status_msg],
        )

        rules_file.upload(
            fn=load_rules_file,
            inputs=[rules_file],
            outputs=[rules_table, status_msg],
        )

        resolve_btn.click(
            fn=resolve_handler,
            inputs=[payload_text, rules_table, text_separator, from_chat_source],
            outputs=[resolved_output, resolve_status],
        )

    with gr.Tab("Explore Payload"):
        gr.Markdown("### 1. Find expressions")
        gr.Markdown("Lists JSON paths (or XPath expressions for XML) found in the payload from the first tab.")
        explore_btn = gr.Button("Explore Payload")
        explore_status = gr.Textbox(label="Explore Status", interactive=False)
        path_selector = gr.Dropdown(
            label="Expressions",
            choices=[],
            value=[],
            multiselect=True,
            interactive=True,
            info="Select expressions to turn into rules (none selected means all).",
        )

        gr.Markdown("### 2. Suggest rules")
        suggest_btn = gr.Button("Fill Rule Table", variant="primary")

        def explore_and_update(payload):
            paths, message = explore_payload_handler(payload)
            return gr.update(choices=paths, value=[]), message

        explore_btn.click(
            fn=explore_and_update,
            inputs=[payload_text],
            outputs=[path_selector, explore_status],
        )

        suggest_btn.click(
            fn=suggest_rules_handler,
            inputs=[payload_text, path_selector],
            outputs=[rules_table, explore_status],
        )

if __name__ == "__main__":
    demo.launch()
