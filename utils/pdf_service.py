import os
import html
import base64
import asyncio
import logging
import tempfile
import markdown
from typing import Dict
from datetime import datetime
from selenium import webdriver
from selenium.common.exceptions import WebDriverException
from selenium.webdriver.chrome.options import Options
from selenium.webdriver.chrome.service import Service

from utils.errors import UpstreamError

logger = logging.getLogger(__name__)

# A4, inches
PRINT_OPTIONS = {
    'landscape': False,
    'displayHeaderFooter': False,
    'printBackground': True,
    'preferCSSPageSize': True,
    'paperWidth': 8.27,
    'paperHeight': 11.69,
    'marginTop': 0.5,
    'marginBottom': 0.5,
    'marginLeft': 0.5,
    'marginRight': 0.5,
}


REPORT_CSS = """
@page { size: A4; margin: 0.5in; }
* { margin: 0; padding: 0; box-sizing: border-box; }
body { font: 12px/1.5 Georgia, serif; color: #222; padding: 16px; }
h1 { font-size: 20px; } .lead { color: #666; margin-bottom: 12px; }
.summary { display: flex; gap: 32px; border-top: 1px solid #999; border-bottom: 1px solid #999; padding: 8px 0; margin-bottom: 16px; }
.summary b { display: block; font-size: 15px; }
.question-container { page-break-inside: avoid; margin-bottom: 14px; padding-left: 10px; }
.question-container.correct { border-left: 3px solid #2E8B57; }
.question-container.incorrect { border-left: 3px solid #C0392B; }
.question-header { display: flex; justify-content: space-between; font-weight: bold; }
.options { list-style: none; margin: 4px 0; }
.option { padding: 2px 6px; }
.option.correct { background: #DFF3E6; }
.option.wrong { background: #F7DEDB; text-decoration: line-through; }
.marked { font-style: italic; color: #555; }
"""


def _markdown_to_html(text: str) -> str:
    """Question text may carry markdown (inline code, lists)."""
    if not text:
        return ""
    return markdown.markdown(html.escape(text), extensions=['extra', 'sane_lists'])


async def generate_attempt_pdf(attempt: Dict, output_path: str):
    """Render a finalized attempt to PDF using headless Chrome."""
    html_content = render_attempt_html(attempt)

    try:
        return await asyncio.to_thread(_generate_pdf_with_selenium, html_content, output_path)
    except WebDriverException as e:
        logger.error("PDF rendering failed: %s", e)
        raise UpstreamError("Failed to generate PDF report")


def _generate_pdf_with_selenium(html_content: str, output_path: str):
    chrome_options = Options()
    chrome_options.add_argument("--headless=new")
    chrome_options.add_argument("--no-sandbox")
    chrome_options.add_argument("--disable-dev-shm-usage")
    chrome_options.add_argument("--disable-gpu")

    with tempfile.NamedTemporaryFile(mode='w', suffix='.html', delete=False, encoding='utf-8') as f:
        temp_html = f.name
        f.write(html_content)

    driver = None
    try:
        driver = webdriver.Chrome(service=Service(), options=chrome_options)
        driver.get(f"file://{temp_html}")
        driver.implicitly_wait(2)

        result = driver.execute_cdp_cmd('Page.printToPDF', PRINT_OPTIONS)

        with open(output_path, 'wb') as pdf_file:
            pdf_file.write(base64.b64decode(result['data']))
    finally:
        if driver:
            driver.quit()
        os.unlink(temp_html)

    return output_path


def _option_class(option: str, question: Dict) -> str:
    if option == question.get("answer"):
        return "option correct"
    if option == question.get("markedOption"):
        return "option wrong"
    return "option"


def render_attempt_html(attempt: Dict) -> str:
    questions_html = []

    for q in attempt.get("questions", []):
        options = "\n".join(
            f'<li class="{_option_class(opt, q)}">{html.escape(str(opt))}</li>'
            for opt in q.get("options", [])
        )
        marked = q.get("markedOption")
        verdict = "correct" if q.get("isCorrect") else "incorrect"

        questions_html.append(f"""
        <div class="question-container {verdict}">
            <div class="question-header">
                <span class="question-number">Q{html.escape(str(q.get("questionNumber", "")))}</span>
                <span class="question-score">{q.get("score", 0)} / {q.get("marks", 0)}</span>
            </div>
            <div class="question-title">{_markdown_to_html(str(q.get("question", "")))}</div>
            <ul class="options">{options}</ul>
            <div class="marked">Your answer: {html.escape(str(marked)) if marked else "<em>not answered</em>"}</div>
        </div>
        """)

    title = html.escape(str(attempt.get("title") or "Quiz"))
    description = html.escape(str(attempt.get("description") or ""))
    minutes, seconds = divmod(int(attempt.get("timeTaken") or 0), 60)
    generated_on = datetime.now().strftime("%B %d, %Y")
    questions_content = "\n".join(questions_html)

    return f"""
    <!DOCTYPE html>
    <html lang="en">
    <head>
        <meta charset="UTF-8">
        <title>{title} - Report</title>
        <style>{REPORT_CSS}</style>
    </head>
    <body>
        <h1>{title}</h1>
        <p class="lead">{description}</p>
        <div class="summary">
            <div>Score<b>{attempt.get("totalMarks", 0)} / {attempt.get("maxMarks", 0)}</b></div>
            <div>Time taken<b>{minutes}m {seconds:02d}s</b></div>
            <div>Generated<b>{generated_on}</b></div>
        </div>
        {questions_content}
    </body>
    </html>
    """
