"""Streamlit UI for ReFit."""

from __future__ import annotations

import logging

import streamlit as st

from ReFit import token_store
from ReFit.aggregator import analyze_repository
from ReFit.models import AnalysisConfig, AnalysisReport, TraversalState
from ReFit.providers.github import GitHubError, GitHubProvider, RateLimitError
from ReFit.report import REPORT_COLUMNS, append_report_csv, render_csv
from ReFit.url_parser import URLParseError, parse_repo_url

logger = logging.getLogger(__name__)


def _qp(key: str, default: str = "") -> str:
    """Read a query parameter, returning *default* if absent."""
    params = st.query_params
    return params.get(key, default)


def _qp_int(key: str, default: int) -> int:
    try:
        return int(_qp(key, str(default)))
    except ValueError:
        return default


def main() -> None:
    st.set_page_config(
        page_title="ReFit",
        page_icon="📏",
        layout="wide",
    )

    # --- Header with settings popover ---
    header_left, header_right = st.columns([8, 1])
    with header_left:
        st.title("ReFit")
    with header_right:
        st.markdown("<div style='height: 1.5rem'></div>", unsafe_allow_html=True)
        with st.popover("⚙", use_container_width=True):
            st.subheader("Settings")

            saved_gh = token_store.load(token_store.GITHUB_TOKEN_KEY) or ""
            github_token = st.text_input(
                "GitHub Token (optional)",
                value=_qp("token") or saved_gh,
                type="password",
                help="Required for private repos. Increases rate limit from 60 to 5,000 requests/hour.",
            )

            if token_store.is_available():
                remember = st.checkbox(
                    "Save token to OS keychain",
                    value=bool(saved_gh),
                    help="The token is stored in macOS Keychain or Windows Credential Manager.",
                )
                if remember and github_token:
                    token_store.save(token_store.GITHUB_TOKEN_KEY, github_token)
                elif saved_gh and not (remember and github_token):
                    token_store.delete(token_store.GITHUB_TOKEN_KEY)

            defaults = AnalysisConfig()
            max_files = st.number_input(
                "Max files to examine",
                min_value=1,
                max_value=100_000,
                value=_qp_int("max_files", defaults.max_files),
                step=100,
                help="The analysis stops once this many files have been examined.",
            )
            char_limit = st.number_input(
                "Character budget",
                min_value=1,
                value=_qp_int("char_limit", defaults.char_limit),
                step=10_000,
            )
            csv_path = st.text_input(
                "Append results to CSV (optional)",
                value=_qp("csv"),
                placeholder="results.csv",
            )

    st.caption(
        "Check whether a GitHub repository's source code fits within a character budget."
    )

    url = st.text_input(
        "Repository",
        value=_qp("url"),
        placeholder="https://github.com/owner/repo or owner/repo",
    )

    analyze_clicked = st.button("Analyze", type="primary", use_container_width=True)

    if analyze_clicked and url:
        config = AnalysisConfig(max_files=int(max_files), char_limit=int(char_limit))
        _run_analysis(url, github_token, config, csv_path.strip())
    elif analyze_clicked:
        st.error("Please enter a repository URL.")

    _show_history(st.session_state.get("reports", []))


def _show_report(report: AnalysisReport, char_limit: int) -> None:
    if report.meets_requirement:
        st.success(f"{report.name} fits within {char_limit:,} characters.")
    else:
        st.error(f"{report.name} does not meet the {char_limit:,} character budget.")
    if report.comment:
        st.warning(report.comment)

    col_chars, col_lines, col_stars, col_forks = st.columns(4)
    col_chars.metric("Characters", f"{report.total_characters:,}")
    col_lines.metric("Lines", f"{report.total_lines:,}")
    col_stars.metric("Stars", f"{report.stars:,}")
    col_forks.metric("Forks", f"{report.forks:,}")


def _show_history(reports: list[AnalysisReport]) -> None:
    if not reports:
        return
    st.subheader("Results")
    st.dataframe(
        [dict(zip(REPORT_COLUMNS, r.to_row())) for r in reports],
        use_container_width=True,
        hide_index=True,
    )
    st.download_button(
        label="Download CSV",
        data=render_csv(reports),
        file_name="refit_results.csv",
        mime="text/csv",
        use_container_width=True,
    )


def _run_analysis(
    url: str,
    github_token: str,
    config: AnalysisConfig,
    csv_path: str = "",
) -> None:
    try:
        repo_info = parse_repo_url(url)
    except URLParseError as exc:
        st.error(f"Invalid URL: {exc}")
        return

    provider = GitHubProvider(token=token_store.resolve_github_token(github_token))

    status_text = st.empty()

    def _on_progress(state: TraversalState) -> None:
        status_text.text(f"{state.files_processed} files examined: {state.current_path}")

    try:
        with st.spinner(f"Analyzing {repo_info.full_name}..."):
            report = analyze_repository(provider, repo_info, config, _on_progress)
    except RateLimitError as exc:
        st.error(str(exc))
        st.info(
            "Tip: Add a GitHub token in Settings (⚙) to increase your rate limit "
            "from 60 to 5,000 requests per hour."
        )
        return
    except GitHubError as exc:
        st.error(str(exc))
        return

    status_text.empty()
    st.session_state.setdefault("reports", []).append(report)

    if csv_path:
        try:
            append_report_csv(csv_path, report)
        except OSError as exc:
            logger.warning("Could not write %s: %s", csv_path, exc)
            st.warning(f"Could not write {csv_path}: {exc}")

    _show_report(report, config.char_limit)


if __name__ == "__main__":
    main()
