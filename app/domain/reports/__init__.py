"""Reports domain - Excel workbooks and summary statistics"""
