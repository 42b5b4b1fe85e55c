from losreport.report import eda, figures
