"""
Punto de arranque de Política Pro:
    streamlit run main.py

El login, el menú por rol y las páginas están en app.py.
"""

from app import main


if __name__ == "__main__":
    main()
