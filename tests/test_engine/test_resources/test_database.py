import pytest
import json
from engine.resources.database import Database

@pytest.fixture
def mock_db_path(tmp_path):
    # Setup mock directory structure in tmp_path
    schemas = tmp_path / "schemas"
    schemas.mkdir()
    
    database = tmp_path / "database"
    database.mkdir()
    (database / "interactions").mkdir()
    
    # Minimal interaction schema
    interaction_schema = {
        "type": "object",
        "required": ["id", "name"],
        "properties": {
            "id": {"type": "string"},
            "name": {"type": "string"}
        }
    }
    with open(schemas / "interaction.schema.json", "w") as f:
        json.dump(interaction_schema, f)
        
    return tmp_path

def write_entries(path, name, data):
    with open(path / "database" / "interactions" / name, "w") as f:
        json.dump(data, f)

def test_load_all(mock_db_path):
    write_entries(mock_db_path, "basic.json", [
        {"id": "focus", "name": "Focus"}
    ])
        
    db = Database(mock_db_path)
    db.load_all()
    
    assert "focus" in db.interactions
    assert db.get_interaction("focus")["name"] == "Focus"

def test_single_entry_file(mock_db_path):
    write_entries(mock_db_path, "single.json", {"id": "rally", "name": "Rally"})

    db = Database(mock_db_path)
    db.load_all()

    assert "rally" in db.interactions

def test_validation_error(mock_db_path):
    # Missing name
    write_entries(mock_db_path, "broken.json", [
        {"id": "broken"},
        {"id": "fine", "name": "Fine"},
    ])
        
    db = Database(mock_db_path)
    db.load_all()
    
    assert "broken" not in db.interactions
    assert "fine" in db.interactions

def test_duplicate_ids_across_files(mock_db_path):
    write_entries(mock_db_path, "a.json", [{"id": "focus", "name": "First"}])
    write_entries(mock_db_path, "b.json", [{"id": "focus", "name": "Second"}])

    db = Database(mock_db_path)
    with pytest.raises(ValueError, match="focus"):
        db.load_all()

def test_invalid_json_is_skipped(mock_db_path):
    (mock_db_path / "database" / "interactions" / "bad.json").write_text("{not json")
    write_entries(mock_db_path, "good.json", [{"id": "focus", "name": "Focus"}])

    db = Database(mock_db_path)
    db.load_all()

    assert list(db.interactions) == ["focus"]

def test_missing_schema(mock_db_path):
    write_entries(mock_db_path, "basic.json", [{"id": "focus", "name": "Focus"}])
    
    (mock_db_path / "schemas" / "interaction.schema.json").unlink()
    
    db = Database(mock_db_path)
    db.load_all()
    
    # A category without a schema is not loaded
    assert "focus" not in db.interactions

def test_missing_directories(tmp_path):
    db = Database(tmp_path)
    db.load_all()

    assert db.interactions == {}
