from __future__ import annotations
import streamlit as st
import re
import pandas as pd
import numpy as np
from typing import List
import matplotlib.pyplot as plt
import networkx as nx
import io

from textrank_keywords.datatypes import KeywordResult, Pos, Sentence
from textrank_keywords.graphing import Graph, build_graph
from textrank_keywords.keywords import RankConfig, run_pipeline
from textrank_keywords.lexicon import Lexicon, LexiconError
from textrank_keywords.preprocessing import preprocess_text
from textrank_keywords.scoring import finalize_ranking, merge_keyphrases, select_keywords, text_rank

def extract_rtf_text(rtf_content):
    """Extract plain text from RTF content."""
    text = re.sub(r'\\par[d]? ?', '\n', rtf_content)
    text = re.sub(r'\\[a-z]+-?\d* ?', '', text)
    text = re.sub(r'[{}]', '', text)
    text = re.sub(r'[ \t]+', ' ', text)
    return text.strip()

def extract_markdown_text(md_content):
    """Extract plain text from Markdown content."""
    # Code blocks carry no keywords
    text = re.sub(r'```.*?```', '', md_content, flags=re.DOTALL)
    text = re.sub(r'`([^`]+)`', r'\1', text)
    # Headers end a sentence
    text = re.sub(r'^#{1,6}\s+(.*)$', r'\1.', text, flags=re.MULTILINE)
    text = re.sub(r'\*{1,2}(.*?)\*{1,2}', r'\1', text)
    text = re.sub(r'_{1,2}(.*?)_{1,2}', r'\1', text)
    text = re.sub(r'\[([^\]]+)\]\([^)]+\)', r'\1', text)
    text = re.sub(r'^-{3,}$', '', text, flags=re.MULTILINE)
    text = re.sub(r'\n\s*\n', '\n\n', text)
    return text.strip()

def load_text_from_file(uploaded_file):
    """Load text content from uploaded file based on file type."""
    file_extension = uploaded_file.name.lower().split('.')[-1]
    content = uploaded_file.read().decode("utf-8")

    if file_extension == 'rtf':
        return extract_rtf_text(content)
    elif file_extension == 'md':
        return extract_markdown_text(content)
    else:
        return content

@st.cache_resource
def load_lexicon(data: bytes) -> Lexicon:
    return Lexicon.from_bytes(data)

def draw_graph_visualization(graph: Graph, max_nodes: int = 60):
    """Draw the co-occurrence graph, keyword nodes highlighted and sized by score."""
    G = graph.to_networkx()
    if len(G.nodes) > max_nodes:
        # keep the best scored nodes only
        keep = sorted(G.nodes, key=lambda n: G.nodes[n]['score'], reverse=True)[:max_nodes]
        G = G.subgraph(keep).copy()

    fig, ax = plt.subplots(figsize=(12, 9))
    ax.set_title("Co-occurrence Graph (keywords in yellow)", fontsize=14, fontweight='bold')

    if len(G.nodes) > 0:
        pos = nx.spring_layout(G, k=1.5, iterations=50, seed=42)
        scores = np.array([G.nodes[n]['score'] for n in G.nodes])
        top = scores.max() if scores.size and scores.max() > 0 else 1.0
        sizes = 300 + 1200 * scores / top
        colors = ['gold' if G.nodes[n]['is_keyword'] else 'lightblue' for n in G.nodes]

        nx.draw_networkx_nodes(G, pos, ax=ax, node_color=colors, node_size=sizes, alpha=0.8)

        edges = G.edges(data=True)
        if edges:
            weights = [edge[2]['weight'] for edge in edges]
            max_weight = max(weights) if weights else 1
            edge_widths = [3 * (w / max_weight) for w in weights]
            nx.draw_networkx_edges(G, pos, ax=ax, width=edge_widths, alpha=0.5, edge_color='gray')

        nx.draw_networkx_labels(G, pos, ax=ax, font_size=9)

        if len(G.nodes) <= 15:
            edge_labels = {(u, v): str(d['weight']) for u, v, d in G.edges(data=True)}
            nx.draw_networkx_edge_labels(G, pos, edge_labels, ax=ax, font_size=8)

    ax.axis('off')
    plt.tight_layout()

    buf = io.BytesIO()
    plt.savefig(buf, format='png', dpi=150, bbox_inches='tight')
    buf.seek(0)
    plt.close(fig)

    return buf

def create_sidebar_controls() -> tuple[RankConfig, bool]:
    """Create sidebar controls for parameters."""
    st.sidebar.header("Parameters")
    window_size = st.sidebar.slider("Window size", min_value=1, max_value=10, value=3,
                                    help="Number of following non-stop words linked to each word")
    num_keywords = st.sidebar.slider("Number of keywords", min_value=1, max_value=50, value=10)
    num_iterations = st.sidebar.slider("Iterations", min_value=1, max_value=100, value=20)
    damping = st.sidebar.slider("Damping factor", min_value=0.0, max_value=1.0, value=0.85, step=0.05)

    st.sidebar.header("Debug Options")
    debug_mode = st.sidebar.checkbox("Enable Debug Mode", value=True, help="Show detailed pipeline steps")

    config = RankConfig(window_size=window_size, num_keywords=num_keywords,
                        num_iterations=num_iterations, damping=damping)
    return config, debug_mode

def _tokens_table(sentences: List[Sentence]) -> pd.DataFrame:
    rows = []
    for i, sentence in enumerate(sentences):
        for tok in sentence:
            rows.append({
                "Sentence #": i + 1,
                "Token": tok.surface,
                "POS": tok.pos.value,
                "Lemma": tok.lemma,
            })
    return pd.DataFrame(rows, columns=["Sentence #", "Token", "POS", "Lemma"])

def _results_table(results: List[KeywordResult]) -> pd.DataFrame:
    return pd.DataFrame(
        [{"Rank": i + 1, "Phrase": r.phrase, "Score": round(r.score, 4)} for i, r in enumerate(results)],
        columns=["Rank", "Phrase", "Score"],
    )

def debug_pipeline(text: str, lexicon: Lexicon, config: RankConfig) -> List[KeywordResult]:
    """Run the pipeline with detailed debugging information."""

    # Step 1: Tokenization
    st.header("Step 1: Sentence Splitting & Token Classification")
    with st.expander("Tokenization Details", expanded=True):
        with st.spinner("Tokenizing..."):
            sentences = preprocess_text(text, lexicon)

        tokens_df = _tokens_table(sentences)
        st.success(f"Split {len(sentences)} sentences into {len(tokens_df)} tokens")

        col1, col2, col3 = st.columns(3)
        with col1:
            st.metric("Sentences", len(sentences))
        with col2:
            st.metric("Stop tokens", int((tokens_df["POS"] == Pos.STOP.value).sum()) if len(tokens_df) else 0)
        with col3:
            st.metric("Unknown words", int((tokens_df["POS"] == Pos.UNKNOWN.value).sum()) if len(tokens_df) else 0)

        st.dataframe(tokens_df, use_container_width=True, height=300)

    # Step 2: Graph Construction
    st.header("Step 2: Co-occurrence Graph")
    with st.expander("Graph Construction Details", expanded=True):
        st.write(f"**Running:** Linking each word to the next {config.window_size} non-stop words")

        with st.spinner("Building graph..."):
            graph = build_graph(sentences, window_size=config.window_size)

        n_edges = graph.edge_count()
        st.success(f"Created graph with {len(graph)} nodes and {n_edges} edges")

        col1, col2, col3 = st.columns(3)
        with col1:
            st.metric("Nodes (Lemmas)", len(graph))
        with col2:
            st.metric("Edges", n_edges)
        with col3:
            max_possible_edges = len(graph) * (len(graph) - 1) // 2
            density = n_edges / max_possible_edges if max_possible_edges > 0 else 0
            st.metric("Graph Density", f"{density:.2%}")

        edges_data = []
        for node in graph:
            for neighbor, weight in node.edges.items():
                if node.lemma <= neighbor:
                    edges_data.append({"From": node.lemma, "To": neighbor, "Weight": weight})
        if edges_data:
            edges_df = pd.DataFrame(edges_data).sort_values("Weight", ascending=False)
            st.dataframe(edges_df, use_container_width=True, height=250)
        else:
            st.warning("No edges: every sentence has at most one content word")

    if len(graph) == 0:
        st.warning("No content words found in the text")
        return []

    # Step 3: TextRank
    st.header("Step 3: TextRank Scoring")
    with st.expander("Scoring Details", expanded=True):
        st.write(f"**Running:** {config.num_iterations} iterations, damping {config.damping}")

        with st.spinner("Ranking..."):
            text_rank(graph, num_iterations=config.num_iterations, damping=config.damping)
            keywords = select_keywords(graph, config.num_keywords)

        scores = np.array([node.score for node in graph])
        col1, col2, col3, col4 = st.columns(4)
        with col1:
            st.metric("Min Score", f"{scores.min():.3f}")
        with col2:
            st.metric("Max Score", f"{scores.max():.3f}")
        with col3:
            st.metric("Mean Score", f"{np.mean(scores):.3f}")
        with col4:
            st.metric("Std Score", f"{np.std(scores):.3f}")

        scoring_df = pd.DataFrame([{
            "Lemma": node.lemma,
            "Score": round(node.score, 4),
            "Degree": len(node.edges),
            "Total Weight": node.edge_weight_total,
            "Keyword": "yes" if node.is_keyword else "",
        } for node in graph]).sort_values("Score", ascending=False)
        st.dataframe(scoring_df, use_container_width=True, height=300)

        st.subheader("Graph Visualization")
        try:
            with st.spinner("Generating graph visualization..."):
                graph_image = draw_graph_visualization(graph)
            st.image(graph_image, caption="Node size follows the TextRank score", use_column_width=True)
        except Exception as e:
            st.error(f"Could not generate graph visualization: {str(e)}")

    # Step 4: Keyphrases
    st.header("Step 4: Keyphrase Merging")
    with st.expander("Keyphrase Details", expanded=True):
        st.write("**Running:** Merging runs of adjacent keywords, then keeping the best scores")

        merged = merge_keyphrases(graph, keywords)
        phrases = merged[len(keywords):]
        if phrases:
            st.dataframe(_results_table(phrases), use_container_width=True)
        else:
            st.info("No adjacent keywords to merge")

        results = finalize_ranking(merged, config.num_keywords)
        col1, col2 = st.columns(2)
        with col1:
            st.metric("Single Keywords", len(keywords))
        with col2:
            st.metric("Merged Keyphrases", len(phrases))

    return results

def main():
    st.title("TextRank Keyword Extractor")
    st.write("Upload a lexicon and a text file to extract its keywords and keyphrases")

    config, debug_mode = create_sidebar_controls()

    lexicon_file = st.file_uploader("Choose a lexicon file", type=['bin', 'dat'],
                                    help="Binary lexicon built with `textrank-keywords prepare`")
    uploaded_file = st.file_uploader(
        "Choose a text file",
        type=['txt', 'rtf', 'md'],
        help="Upload a text file (supports .txt, .rtf, .md formats)"
    )

    if lexicon_file is None or uploaded_file is None:
        return

    try:
        lexicon = load_lexicon(lexicon_file.getvalue())
    except LexiconError as e:
        st.error(f"Invalid lexicon: {str(e)}")
        return
    st.caption(f"Lexicon: {len(lexicon)} entries")

    text = load_text_from_file(uploaded_file)
    file_extension = uploaded_file.name.lower().split('.')[-1]
    st.subheader(f"Original Text ({file_extension.upper()} format)")
    st.text_area("Content", text, height=200, disabled=True)

    if st.button("Extract Keywords", type="primary"):
        try:
            if debug_mode:
                st.markdown("---")
                st.title("Pipeline Debug Mode")
                results = debug_pipeline(text, lexicon, config)
            else:
                with st.spinner("Extracting keywords..."):
                    _, results = run_pipeline(text, lexicon, config)

            st.markdown("---")
            st.header("Keywords")
            if results:
                st.dataframe(_results_table(results), use_container_width=True)
                st.download_button(
                    "Download as TSV",
                    "".join(f"{r.phrase}\t{r.score:g}\n" for r in results),
                    file_name="keywords.tsv",
                )
            else:
                st.warning("No keywords found")

        except Exception as e:
            st.error(f"Error extracting keywords: {str(e)}")
            st.exception(e)

if __name__ == "__main__":
    main()
