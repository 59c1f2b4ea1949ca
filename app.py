"""
SciLingo - Main Application Entry Point
"""
from scilingo import create_app

app = create_app()

if __name__ == '__main__':
    app.run(debug=True, host='0.0.0.0')
