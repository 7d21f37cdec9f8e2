import os
import sys
sys.path.append(os.path.join(os.path.dirname(__file__), "src"))
import pandas as pd
from trip_emissions.config import DEFAULT_CONFIG_PATH

# Ambient settings only. Emission factors, credit constants and the route
# table are fixed in trip_emissions/constants.py and are not read from here.
PARAMS = [
    # --- SECTION: DISPLAY ---
    {
        "Key": "DISPLAY_DECIMALS",
        "Value": 2,
        "Unit": "Integer",
        "Section": "1. Display",
        "Description": "Decimal places for distances, emissions and prices in terminal output."
    },
    {
        "Key": "DISPLAY_CREDIT_DECIMALS",
        "Value": 4,
        "Unit": "Integer",
        "Section": "1. Display",
        "Description": "Decimal places for carbon credit quantities in terminal output."
    },

    # --- SECTION: OUTPUT ---
    {
        "Key": "REPORTS_DIR",
        "Value": "reports",
        "Unit": "Path",
        "Section": "2. Output",
        "Description": "Folder for batch reports, charts and audit logs (relative paths start at the project root)."
    },
    {
        "Key": "AUDIT_ENABLED",
        "Value": True,
        "Unit": "Bool",
        "Section": "2. Output",
        "Description": "Write every trip calculation step to reports/audit_<session>.txt."
    },
    {
        "Key": "LOG_FILE",
        "Value": "trip_emissions.log",
        "Unit": "Path",
        "Section": "2. Output",
        "Description": "Optional detailed log file (DEBUG level, relative to the project root)."
    },
]


def create_formatted_excel(output_path: str = DEFAULT_CONFIG_PATH):
    df = pd.DataFrame(PARAMS)
    df = df[["Section", "Key", "Value", "Unit", "Description"]]

    os.makedirs(os.path.dirname(output_path), exist_ok=True)
    print(f"Generating {output_path}...")

    with pd.ExcelWriter(output_path, engine='xlsxwriter') as writer:
        df.to_excel(writer, index=False, sheet_name='Parameters')

        workbook = writer.book
        worksheet = writer.sheets['Parameters']

        header_fmt = workbook.add_format({
            'bold': True,
            'text_wrap': True,
            'valign': 'top',
            'fg_color': '#4F81BD',
            'font_color': '#FFFFFF',
            'border': 1
        })
        section_fmt = workbook.add_format({'bold': True, 'bg_color': '#DCE6F1', 'border': 1})
        key_fmt = workbook.add_format({'bold': True, 'font_color': '#333333', 'bg_color': '#F2F2F2', 'border': 1})
        value_fmt = workbook.add_format({'bg_color': '#FFFFCC', 'border': 1})  # editable
        text_fmt = workbook.add_format({'text_wrap': True, 'valign': 'top', 'border': 1})

        worksheet.set_column('A:A', 20)
        worksheet.set_column('B:B', 28)
        worksheet.set_column('C:C', 22, value_fmt)
        worksheet.set_column('D:D', 10)
        worksheet.set_column('E:E', 60, text_fmt)

        for col_num, value in enumerate(df.columns.values):
            worksheet.write(0, col_num, value, header_fmt)

        for row_num, row_data in enumerate(PARAMS, start=1):
            worksheet.write(row_num, 0, row_data["Section"], section_fmt)
            worksheet.write(row_num, 1, row_data["Key"], key_fmt)
            worksheet.write(row_num, 2, row_data["Value"], value_fmt)

    print("Done.")


if __name__ == "__main__":
    create_formatted_excel(sys.argv[1] if len(sys.argv) > 1 else DEFAULT_CONFIG_PATH)
