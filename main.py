"""
La Maison reservation site
==========================
Restaurant front page with:
- Month calendar and time slot picker
- Booking form with draft autosave and a confirmation summary
- Sidebar chat assistant backed by the OpenAI chat completions API

Run with: streamlit run main.py
"""

from lamaison_app.ui_streamlit import main

main()
