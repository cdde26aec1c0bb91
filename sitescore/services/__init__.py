from .fetcher import fetch_page
from .seo_extractor import analyze
from .fallback import build_fallback_metrics
from .analysis import analyze_url, run_analysis
from .score_calculator import calculate_score, generate_summary
