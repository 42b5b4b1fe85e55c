from losreport.data.load import load_data, DataSource, DataNotFoundError
from losreport.data.preprocess import get_train_test_split
from losreport.data.validators import validate_dataset

__all__ = ["load_data", "DataSource", "DataNotFoundError", "get_train_test_split", "validate_dataset"]
