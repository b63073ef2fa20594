from src.placement_attendance.placement_attendance.main import create_app

# `flask --app app run` / `flask --app app mark-absent --date 2026-02-02`
app = create_app()

if __name__ == "__main__":
    app.run(debug=app.config.get("DEBUG", False))
